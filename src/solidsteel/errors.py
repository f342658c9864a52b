"""Custom exceptions for the Solid Steel site service."""


class SolidSteelError(Exception):
    """Base exception for all site service errors."""

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ContentNotFoundError(SolidSteelError):
    """Raised when a requested content record does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(
            f"{kind} not found: {identifier}",
            details={"kind": kind, "identifier": identifier},
        )


class ContentConflictError(SolidSteelError):
    """Raised when a write would produce a duplicate slug."""

    def __init__(self, kind: str, slug: str) -> None:
        super().__init__(
            f"{kind} with slug '{slug}' already exists",
            details={"kind": kind, "slug": slug},
        )


class ContentValidationError(SolidSteelError):
    """Raised when a content record fails schema validation."""

    def __init__(self, kind: str, errors: list[dict[str, object]]) -> None:
        super().__init__(f"Invalid {kind} data", details={"kind": kind, "errors": errors})
        self.errors = errors


class BlobStorageError(SolidSteelError):
    """Raised when the blob storage provider call fails."""


class BlobConfigurationError(BlobStorageError):
    """Raised when blob storage credentials are missing."""


class SessionError(SolidSteelError):
    """Raised when an admin session token cannot be created or verified."""
