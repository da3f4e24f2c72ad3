"""
Errors raised by the booking and negotiation workflows.
Routes turn them into JSON ``{"error": ...}`` responses.
"""


class WorkflowError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(WorkflowError):
    status_code = 400


class Forbidden(WorkflowError):
    status_code = 403


class NotFound(WorkflowError):
    status_code = 404


class Conflict(WorkflowError):
    status_code = 409


class InvalidTransition(WorkflowError):
    """Raised when a bid or booking is not in a state that allows the action."""
    status_code = 409
