# backend/inventory_tracker/exceptions.py
from fastapi import Request, status
from fastapi.responses import JSONResponse


class InventoryError(Exception):
    """Base class for domain errors; carries the HTTP status it maps to."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Inventory operation failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(InventoryError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class InvalidArgumentError(InventoryError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid argument"


class InsufficientStockError(InventoryError):
    """Raised when a movement would drive a product's quantity below zero"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Insufficient stock"


class ConflictError(InventoryError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource was modified concurrently"


async def inventory_error_handler(request: Request, exc: InventoryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
