# app/exceptions.py
"""
Domain errors raised by the services layer.
Translated to HTTP responses once, in app.main.
"""


class BackOfficeError(Exception):
    """Base class. `status_code` is the HTTP status the API answers with."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(BackOfficeError):
    """Missing required field or quantity out of range. Nothing was written."""
    status_code = 400


class NotFound(BackOfficeError):
    status_code = 404


class ConfirmationRequired(BackOfficeError):
    """Destructive operation issued without ?confirm=true."""
    status_code = 409


class StockConflict(BackOfficeError):
    """A unit or the aggregate quantity changed under a sale; the sale was rolled back."""
    status_code = 409


class BillCacheError(BackOfficeError):
    status_code = 500
