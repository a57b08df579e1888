"""Inclusive numeric bounds for integer fields (`min:N`, `max:N`)."""
from abc import abstractmethod
from typing import Any, Optional

from ..core.base_predicate import BasePredicate, is_int
from ..core.errors import AboveMaximum, BelowMinimum, ValidationError


class BoundPredicate(BasePredicate):
    """Shared parameter parsing and type checking for `min` and `max`."""

    takes_param = True

    def _configure(self, param: Optional[str]) -> None:
        self.bound = self.parse_int(param or "")

    def _check(self, value: Any) -> Optional[ValidationError]:
        if not is_int(value):
            return self.type_mismatch(value, "an integer")
        return self._compare(value)

    @abstractmethod
    def _compare(self, value: int) -> Optional[ValidationError]:
        raise NotImplementedError("Subclasses must implement _compare()")


class MinPredicate(BoundPredicate):
    keyword = "min"
    description = "The integer value must be greater than or equal to the bound."
    failure = BelowMinimum

    def _compare(self, value: int) -> Optional[ValidationError]:
        if value < self.bound:
            return self.fail(f"is smaller than the allowed minimum of {self.bound}.", expected=self.bound, actual=value)
        return None


class MaxPredicate(BoundPredicate):
    keyword = "max"
    description = "The integer value must be less than or equal to the bound."
    failure = AboveMaximum

    def _compare(self, value: int) -> Optional[ValidationError]:
        if value > self.bound:
            return self.fail(f"is larger than the allowed maximum of {self.bound}.", expected=self.bound, actual=value)
        return None
