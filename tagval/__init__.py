"""tagval: declarative validation of decoded JSON records.

Rules are attached to dataclass fields as compact tag strings such as
``"required|email"`` or ``"length_between:4,6"``. The engine walks a record
(recursing into nested records), applies the rules in order and reports the
first violation.

Basic usage:
    from dataclasses import dataclass
    from typing import Optional
    from tagval import bind, rule

    @dataclass
    class Register:
        username: Optional[str] = rule("required")
        email: Optional[str] = rule("required|email")

    register = bind(request_body, Register)
"""

from .core.config import Config
from .core.errors import (
    AboveMaximum,
    BelowMinimum,
    BindError,
    ConfigurationError,
    DecodeError,
    EmptyInputError,
    InvalidFormat,
    LengthMismatch,
    LengthOutOfRange,
    MissingRequiredField,
    NotInAllowedSet,
    PatternMismatch,
    TagvalError,
    TypeMismatch,
    ValidationError,
)
from .core.records import FieldInfo, FieldIterable, rule
from .core.validator import Validator, bind, is_valid, validate_structured

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
    "Config",
    "FieldInfo",
    "FieldIterable",
    "Validator",
    "bind",
    "is_valid",
    "rule",
    "validate_structured",
    "TagvalError",
    "BindError",
    "EmptyInputError",
    "DecodeError",
    "ValidationError",
    "MissingRequiredField",
    "InvalidFormat",
    "NotInAllowedSet",
    "BelowMinimum",
    "AboveMaximum",
    "PatternMismatch",
    "LengthMismatch",
    "LengthOutOfRange",
    "TypeMismatch",
    "ConfigurationError",
]
