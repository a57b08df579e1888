"""Character-count checks for string fields.

Lengths count characters (code points), not encoded bytes.
"""
from typing import Any, Optional

from ..core.base_predicate import BasePredicate
from ..core.errors import ConfigurationError, LengthMismatch, LengthOutOfRange, ValidationError


class LengthPredicate(BasePredicate):
    """`length:N` passes when the string has exactly N characters."""

    keyword = "length"
    description = "The string must have exactly the given number of characters."
    takes_param = True
    failure = LengthMismatch

    def _configure(self, param: Optional[str]) -> None:
        self.expected = self.parse_int(param or "")

    def _check(self, value: Any) -> Optional[ValidationError]:
        if not isinstance(value, str):
            return self.type_mismatch(value, "a string")
        if len(value) != self.expected:
            return self.fail(
                f"has length {len(value)}, expected exactly {self.expected}.",
                expected=self.expected,
                actual=value,
            )
        return None


class LengthBetweenPredicate(BasePredicate):
    """`length_between:LOW,HIGH` passes when LOW <= len(value) <= HIGH."""

    keyword = "length_between"
    description = "The string length must lie within an inclusive range."
    takes_param = True
    failure = LengthOutOfRange

    def _configure(self, param: Optional[str]) -> None:
        bounds = self.split_param()
        if len(bounds) != 2:
            raise ConfigurationError(
                "Rule 'length_between' requires exactly two parameters",
                rule=f"{self.keyword}:{param}",
                field=self.field_name,
            )
        self.low, self.high = (self.parse_int(b) for b in bounds)

    def _check(self, value: Any) -> Optional[ValidationError]:
        if not isinstance(value, str):
            return self.type_mismatch(value, "a string")
        if not self.low <= len(value) <= self.high:
            return self.fail(
                f"has length {len(value)}, expected between {self.low} and {self.high}.",
                expected=(self.low, self.high),
                actual=value,
            )
        return None
