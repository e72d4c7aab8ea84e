"""Module: errors."""


class InventoryError(Exception):
    """Base exception for inventory operations."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MedicationNotFoundError(InventoryError):
    """Raised when a medication id has no record."""

    status_code = 404

    def __init__(self, message: str = "Medication not found"):
        super().__init__(message)


class OutOfStockError(InventoryError):
    """Raised when a dose is requested against zero stock."""
    pass


class InvalidQuantityError(InventoryError):
    """Raised when a restock quantity is not a positive integer."""
    pass
