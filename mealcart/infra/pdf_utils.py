import io
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from mealcart.logic.ingredients.normalize import normalize_store_list
from mealcart.logic.shopping.export import display_name, format_qty
from mealcart.utilities.constants import CHECKLIST_STORE


def generate_pdf_for_groceries(grouped, stores=None, title="Grocery Checklist"):
    """Generate a PDF with one table per store: [ ] / Qty / Unit / Item. Stores with nothing to buy are left out."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(escape(title), styles["Title"]),
        Spacer(1, 16),
    ]

    store_list = normalize_store_list(stores) if stores is not None else list(grouped)
    for store in store_list:
        items = grouped.get(store) or []
        if not items:
            continue
        heading = f"{store} In-Store Checklist" if store == CHECKLIST_STORE else store
        elements.append(Paragraph(escape(heading), styles["Heading2"]))

        data = [["", "Qty", "Unit", "Item"]]
        for item in items:
            data.append(["[ ]", format_qty(item.qty), item.unit, display_name(item.name)])

        table = Table(data, repeatRows=1, colWidths=[30, 60, 60, 380])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
            ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
            ("ALIGN", (0,0), (2,-1), "CENTER"),
            ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
            ("FONTSIZE", (0,0), (-1,0), 12),
            ("BOTTOMPADDING", (0,0), (-1,0), 10),
            ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 12))

    if len(elements) == 2:
        elements.append(Paragraph("Nothing to buy this week.", styles["Normal"]))

    doc.build(elements)
    return buf.getvalue()
