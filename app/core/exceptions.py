from typing import Any, Dict, List, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class ValidationFailed(AppException):
    """Domain validation failure carrying every collected error message."""
    def __init__(self, errors: List[str], message: str = "Validation failed"):
        self.errors = errors
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_FAILED",
            details={"errors": errors}
        )

class InvalidScoreInput(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="INVALID_SCORE_INPUT",
            details=details
        )

class NotFound(AppException):
    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} {entity_id} not found",
            status_code=404,
            error_code="NOT_FOUND",
            details={"entity": entity, "id": str(entity_id)}
        )

class InvalidTransition(AppException):
    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="INVALID_TRANSITION",
            details={"current_status": current_status} if current_status else None
        )
