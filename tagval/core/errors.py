"""Error types raised by tagval.

Data problems (empty input, undecodable input, rule violations) derive from
`TagvalError` and are meant to be reported back to whoever sent the data.
`ConfigurationError` sits outside that hierarchy: it signals a defect in the
rule strings the program itself declares, and a handler written for bad
input data should never catch it by accident.
"""
from typing import Any, Optional


class TagvalError(Exception):
    """Base class for all recoverable tagval errors."""


class BindError(TagvalError):
    """Raised when raw input could not be turned into a record."""


class EmptyInputError(BindError):
    """Raised when nothing was passed in, or the input is an empty JSON object."""

    def __init__(self, message: str = "Nothing was passed in or JSON featured an empty object.") -> None:
        super().__init__(message)


class DecodeError(BindError):
    """Raised when the input is not valid JSON or does not fit the record type.

    Attributes:
        path (str): The JSON path of the offending value, empty when the
            document itself could not be parsed.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ValidationError(TagvalError):
    """The first rule violation found in a record.

    Attributes:
        field (str): Dotted path of the offending field (e.g. `profile.email`).
        rule (str): The keyword of the predicate that failed.
        expected (Any): What the predicate wanted, when meaningful.
        actual (Any): The value that was checked.
    """

    def __init__(
        self,
        message: str,
        field: str = "",
        rule: str = "",
        expected: Any = None,
        actual: Any = None,
    ) -> None:
        self.field = field
        self.rule = rule
        self.expected = expected
        self.actual = actual
        super().__init__(message)

    @property
    def kind(self) -> str:
        """The failure class name, e.g. `BelowMinimum`."""
        return type(self).__name__

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "field": self.field,
            "rule": self.rule,
            "expected": self.expected,
            "actual": self.actual,
            "message": str(self),
        }


class MissingRequiredField(ValidationError):
    pass


class InvalidFormat(ValidationError):
    pass


class NotInAllowedSet(ValidationError):
    pass


class BelowMinimum(ValidationError):
    pass


class AboveMaximum(ValidationError):
    pass


class PatternMismatch(ValidationError):
    pass


class LengthMismatch(ValidationError):
    pass


class LengthOutOfRange(ValidationError):
    pass


class TypeMismatch(ValidationError):
    """A rule was declared against a field of the wrong type."""


class ConfigurationError(Exception):
    """A rule string is malformed: unknown keyword or unusable parameter.

    This is a programming error, not a property of the data being checked.

    Attributes:
        rule (str): The raw rule token that could not be resolved.
        field (Optional[str]): The field the token was declared on, if known.
    """

    def __init__(self, message: str, rule: str = "", field: Optional[str] = None) -> None:
        self.rule = rule
        self.field = field
        if field:
            message = f"{message} (field '{field}')"
        super().__init__(message)
