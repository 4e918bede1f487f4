# inventory_tracker/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_tracker.config import settings
from inventory_tracker.database import init_db
from inventory_tracker.exceptions import InventoryError, inventory_error_handler

# Routers
from inventory_tracker.routes.auth import router as auth_router
from inventory_tracker.routes.categories import router as categories_router
from inventory_tracker.routes.products import router as products_router
from inventory_tracker.routes.stock import router as stock_router
from inventory_tracker.routes.bulk_actions import router as bulk_actions_router
from inventory_tracker.routes.analytics import router as analytics_router
from inventory_tracker.routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialization
init_db()

app = FastAPI(title="Inventory Tracker API", version="1.0.0")

# CORS Configuration for the single-page frontend
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Domain errors -> {"detail": ...} with the matching status code
app.add_exception_handler(InventoryError, inventory_error_handler)

# Router registration
app.include_router(auth_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(stock_router)
app.include_router(bulk_actions_router)
app.include_router(analytics_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Inventory Tracker API is running"}

@app.get("/api/health")
def health_check():
    return {"status": "ok"}
