class SipBuddyError(Exception):
    """Base exception for the project."""

class DataLoadError(SipBuddyError):
    """Raised when a product feed cannot be read or parsed."""

class InvalidCategoryError(SipBuddyError):
    """Raised when a caller asks for a category outside Beer / Wine / RTD."""

    def __init__(self, category):
        super().__init__(f"Invalid category: {category!r}")
        self.category = category

class PersistenceError(SipBuddyError):
    """Raised when the admin settings store cannot be read or written."""
