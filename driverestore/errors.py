class DriveRestoreError(Exception):
    """Base error for the project."""

class ConfigError(DriveRestoreError):
    pass

class TransportError(DriveRestoreError):
    """An API call failed (HTTP error status or connection problem)."""
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status

class FatalSetupError(DriveRestoreError):
    """Bad run parameters or unreachable services. Raised before any mutation."""

class MalformedAuditEvent(DriveRestoreError):
    pass

class StateDrifted(DriveRestoreError):
    """The file is no longer where the incident left it."""
    def __init__(self, file_id: str, expected: str, actual: frozenset, reason: str = ""):
        self.file_id = file_id
        self.expected = expected
        self.actual = actual
        self.reason = reason or f"expected parents {{{expected}}}, found {sorted(actual)}"
        super().__init__(f"{file_id}: {self.reason}")

class MoveFailed(DriveRestoreError):
    def __init__(self, file_id: str, cause: Exception):
        self.file_id = file_id
        self.cause = cause
        super().__init__(f"Move of {file_id} failed: {cause}")
