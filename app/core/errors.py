from enum import Enum


class ErrorType(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    REFERENTIAL_INTEGRITY = "referential_integrity"
    CATEGORY_IN_USE = "category_in_use"
    INTERNAL_ERROR = "internal_error"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.REFERENTIAL_INTEGRITY: 400,
    ErrorType.CATEGORY_IN_USE: 409,
    ErrorType.INTERNAL_ERROR: 500,
}

VALIDATION_FAILED_MESSAGE = "Validation failed."
INTERNAL_ERROR_MESSAGE = "An internal server error occurred. Please try again later."
