"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

The exception class is the failure kind: callers tell an RPC failure from a
missing server attribute or a bad URL with ``except``/``isinstance``, and
the ``code`` attribute carries the same distinction into logs and JSON
error bodies.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class RegistrationError(ApplicationError):
    """Raised when a command name collides with an existing sibling."""

    def __init__(self, name: str, parent: str = "") -> None:
        self.name = name
        self.parent = parent
        where = f" under {parent!r}" if parent else ""
        super().__init__(
            f"command {name!r} is already registered{where}",
            code="CLI_DUPLICATE_COMMAND",
        )


class RPCError(ApplicationError):
    """Raised when a remote procedure call fails."""

    def __init__(
        self,
        message: str = "Remote call failed",
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, code="RPC_CALL_FAILED")


class SerializationError(ApplicationError):
    """Raised when a response cannot be rendered to text."""

    def __init__(self, message: str = "Response could not be serialized") -> None:
        super().__init__(message, code="CLI_SERIALIZATION_ERROR")


class MissingAttributeError(ApplicationError):
    """Raised when a call succeeded but the server left a required field empty."""

    def __init__(self, attribute: str, endpoint: str) -> None:
        self.attribute = attribute
        self.endpoint = endpoint
        super().__init__(
            f"server with RPC endpoint {endpoint} has no {attribute}",
            code="RPC_MISSING_ATTRIBUTE",
        )


class MalformedURLError(ApplicationError):
    """Raised when a URL is present but cannot be parsed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"malformed URL {url!r}: {reason}", code="VAL_MALFORMED_URL")


class ConfigurationError(ApplicationError):
    """Raised when environment overrides or a settings file fail validation."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID")
