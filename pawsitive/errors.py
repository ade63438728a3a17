"""
Error kinds shared by the adoption and donation workflows.

Every failure a caller can see is one of these. ``kind`` is the stable string
rendered at the HTTP boundary, ``status`` the response code it maps to.
"""


class WorkflowError(Exception):
    kind = "internal"
    status = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.kind.replace("_", " ")

    def as_dict(self):
        return {"error": self.kind, "detail": self.message}


class InvalidInput(WorkflowError):
    """Malformed or missing required fields. Not retried."""

    kind = "invalid_input"
    status = 400


class NotFound(WorkflowError):
    kind = "not_found"
    status = 404


class Conflict(WorkflowError):
    """Uniqueness violation; retrying with the same input fails again."""

    kind = "conflict"
    status = 409


class Transient(WorkflowError):
    """Store unavailable or timed out. Safe to retry with backoff."""

    kind = "transient"
    status = 503


class Internal(WorkflowError):
    kind = "internal"
    status = 500
