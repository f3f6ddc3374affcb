"""Domain exceptions.

Services and the auth layer raise these; exception_handlers.py maps them
to HTTP responses. Nothing in here knows about FastAPI.
"""


class SketchroomError(Exception):
    """Base class for all expected, client-visible failures."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)


# ─── 400 ────────────────────────────────────────────────


class InvalidInputError(SketchroomError):
    """Malformed or missing input. Never reaches the store."""

    status_code = 400
    error_code = "invalid_input"


class SelfDeletionError(InvalidInputError):
    """Raised when an account tries to delete itself."""

    error_code = "self_deletion"

    def __init__(self, message: str = "Cannot delete your own account"):
        super().__init__(message)


# ─── 401 ────────────────────────────────────────────────


class AuthenticationError(SketchroomError):
    """Missing, invalid, or expired credentials."""

    status_code = 401
    error_code = "authentication_failed"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


# ─── 403 ────────────────────────────────────────────────


class AuthorizationError(SketchroomError):
    """Valid identity, insufficient privilege."""

    status_code = 403
    error_code = "forbidden"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class AdminRequiredError(AuthorizationError):
    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class RoomAccessDeniedError(AuthorizationError):
    def __init__(self, room_id: int):
        self.room_id = room_id
        super().__init__("Access denied to this room")


# ─── 404 ────────────────────────────────────────────────


class NotFoundError(SketchroomError):
    status_code = 404
    error_code = "not_found"

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("User not found")


class RoomNotFoundError(NotFoundError):
    def __init__(self, room_id: int):
        self.room_id = room_id
        super().__init__("Room not found")


class DiagramNotFoundError(NotFoundError):
    def __init__(self, diagram_id: int):
        self.diagram_id = diagram_id
        super().__init__("Diagram not found")


# ─── 409 ────────────────────────────────────────────────


class ConflictError(SketchroomError):
    status_code = 409
    error_code = "conflict"


class DuplicateEmailError(ConflictError):
    def __init__(self, email: str):
        self.email = email
        super().__init__("User already exists")
