# services/errors.py
"""
Error taxonomy shared by services and route handlers.

Services raise these; ``create_app`` turns them into ``{"error": ..., "details": [...]}``
JSON responses with the matching HTTP status.
"""


class ServiceError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: list | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details or []

    def to_dict(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid input"

    @classmethod
    def from_pydantic(cls, exc, message: str = "Invalid input"):
        """Collect every failing field from a pydantic ValidationError."""
        details = []
        for err in exc.errors():
            loc = [str(x) for x in err.get("loc", ())]
            details.append({
                "field": ".".join(loc) or "body",
                "message": err.get("msg", "invalid value"),
            })
        return cls(message, details=details)

    @property
    def fields(self) -> list[str]:
        return [d["field"] for d in self.details]


class AuthorizationError(ServiceError):
    status_code = 403
    default_message = "Forbidden"

    def __init__(self, message: str | None = None, authenticated: bool = True):
        super().__init__(message or ("Forbidden" if authenticated else "Unauthorized"))
        if not authenticated:
            self.status_code = 401


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    status_code = 409
    default_message = "Conflict"


class InternalError(ServiceError):
    status_code = 500
    default_message = "Internal server error"


class ShareCodeTaken(ConflictError):
    """A freshly generated share code collided with an existing one; retrying may succeed."""
    default_message = "Share code already in use"
