class AppError(Exception):
    """Base class for all application exceptions."""

    error_code = "app_error"

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def reason(self) -> str:
        return f"{self.error_code}: {self.message}"


class ValidationError(AppError):
    """Raised when scheduling inputs are missing or unusable (no group, subjects or venues)."""

    error_code = "validation_error"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)


class ConflictError(AppError):
    """Raised when a subject cannot be placed or a placement collides with an accepted one.

    ``details`` carries the colliding resources under ``conflicts`` and the
    attempted cell under ``cell``.
    """

    error_code = "conflict"

    def __init__(self, message: str, *, conflicts: list[dict] | None = None, cell: dict | None = None, details: dict = None):
        payload = dict(details or {})
        if conflicts is not None:
            payload["conflicts"] = conflicts
        if cell is not None:
            payload["cell"] = cell
        self.conflicts = conflicts or []
        self.cell = cell
        super().__init__(message, status_code=409, details=payload)


class DuplicateError(AppError):
    """Raised when a timetable already exists for a group, month and year."""

    error_code = "duplicate"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)


class PersistenceError(AppError):
    """Raised when the timetable store fails to read or write."""

    error_code = "persistence_error"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""

    error_code = "not_found"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
