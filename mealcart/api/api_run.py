import logging

from fastapi import FastAPI

from mealcart.api.routes import groceries, imports, recipes

# Logging
logger = logging.getLogger("mealcart_app")

# Initialize FastAPI app
app = FastAPI(title="Meal Cart Planner API")

# Include routers
app.include_router(recipes.router)
app.include_router(imports.router)
app.include_router(groceries.router)


@app.get("/api/health")
def health():
    return {"ok": True}


@app.on_event("startup")
def _log_startup():
    logger.info("Meal Cart API started")
