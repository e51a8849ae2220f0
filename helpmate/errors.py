# helpmate/errors.py
"""
Error taxonomy shared by the stores, the services and the HTTP layer.

Every error carries the HTTP status it maps to. ``Unavailable`` is the only
one whose message is replaced with a generic text before it reaches a client.
"""


class HelpMateError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(HelpMateError):
    status_code = 404
    default_message = "Not found"


class Unauthenticated(HelpMateError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(HelpMateError):
    status_code = 403
    default_message = "Access denied"


class Conflict(HelpMateError):
    status_code = 409
    default_message = "Conflict"


class DuplicateEmail(Conflict):
    default_message = "User already exists"


class InvalidInput(HelpMateError):
    status_code = 422
    default_message = "Invalid input"


class Unavailable(HelpMateError):
    status_code = 503
    default_message = "Service temporarily unavailable"
