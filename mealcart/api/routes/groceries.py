from fastapi import APIRouter, Response
from fastapi.responses import HTMLResponse

from mealcart.infra.State_Repository import StateRepository
from mealcart.infra.pdf_utils import generate_pdf_for_groceries
from mealcart.logic.shopping.export import build_print_checklist_html, build_stores_export
from mealcart.logic.shopping.list_builder import build_week_balance, count_items, group_groceries

router = APIRouter(prefix="/api")


@router.get("/groceries")
def get_groceries():
    state = StateRepository().get_state()
    grouped = group_groceries(state)
    return {
        "groups": {store: [item.to_dict() for item in items] for store, items in grouped.items()},
        "text": build_stores_export(grouped, state.stores),
        "count": count_items(grouped),
    }


@router.get("/groceries/checklist", response_class=HTMLResponse)
def grocery_checklist():
    state = StateRepository().get_state()
    return HTMLResponse(content=build_print_checklist_html(group_groceries(state), state.stores))


@router.get("/groceries/pdf")
def grocery_pdf():
    state = StateRepository().get_state()
    pdf_bytes = generate_pdf_for_groceries(group_groceries(state), state.stores)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": "attachment; filename=grocery_checklist.pdf"
        },
    )


@router.get("/week-balance")
def week_balance():
    return build_week_balance(StateRepository().get_state())
