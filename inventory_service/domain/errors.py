"""Error taxonomy shared by the services and the HTTP layer."""

from typing import Optional


class InventoryError(Exception):
    """Base class for every error the services raise on purpose."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Malformed or out-of-range input."""

    status_code = 400


class NotFoundError(InventoryError):
    """A referenced entity does not exist."""

    status_code = 404


class InsufficientStockError(InventoryError):
    """A purchase asks for more than the warehouse holds."""

    status_code = 400

    def __init__(self, product_id: int, requested: int, available: Optional[int] = None):
        if available is None:
            message = f"Product {product_id} is not stocked in this warehouse"
        else:
            message = (
                f"Insufficient stock for product {product_id}: "
                f"requested {requested}, available {available}"
            )
        super().__init__(message)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StoreUnavailableError(InventoryError):
    """The data store could not be reached or rejected a query."""

    status_code = 500
