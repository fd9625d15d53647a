"""Exception hierarchy for ostmap-query."""

from pathlib import Path


class OstmapError(Exception):
    """Base exception for all ostmap-query errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all ostmap-query errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(OstmapError):
    """Configuration-related errors."""

    pass


class ConfigNotFoundError(ConfigError):
    """Configuration file not found."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Config file not found: {path}")


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Translation Errors
class TranslationError(OstmapError):
    """A search request could not be translated into ranges."""

    pass


class EncodingError(TranslationError):
    """Value cannot be encoded to, or decoded from, a timestamp key."""

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot encode {value!r}: {reason}")


class ParseError(TranslationError):
    """Time-span input is not a valid non-negative 64-bit integer."""

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}: {value!r} is not a non-negative 64-bit integer")


class RangeError(TranslationError):
    """Range bounds are out of order."""

    def __init__(self, start: bytes, end: bytes) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Range start {start.hex()} is after end {end.hex()}")


class ValidationError(TranslationError):
    """Invalid input value."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class RequestSyntaxError(TranslationError):
    """A request expression cannot be parsed."""

    def __init__(self, expression: str, message: str) -> None:
        self.expression = expression
        super().__init__(f"Failed to parse request '{expression}': {message}")


# Store Errors
class StoreError(OstmapError):
    """Errors raised by a store connector."""

    pass


class ConnectivityError(StoreError):
    """The store cannot be reached."""

    def __init__(self, endpoint: str, reason: str) -> None:
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Cannot connect to store at {endpoint}: {reason}")


class AuthError(StoreError):
    """Principal could not be authenticated."""

    def __init__(self, principal: str) -> None:
        self.principal = principal
        super().__init__(f"Authentication failed for principal '{principal}'")


class TableNotFoundError(StoreError):
    """Table doesn't exist."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table not found: {table}")
