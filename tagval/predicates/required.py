"""Checks that a field was supplied.

Presence is decided by the absence marker (`None`), never by comparing the
value to a zero value: `0`, `False` and `""` all count as supplied.
"""
from typing import Any, Optional

from ..core.base_predicate import BasePredicate
from ..core.errors import MissingRequiredField, ValidationError
from ..core.records import is_absent


class RequiredPredicate(BasePredicate):
    """Fails when the field's value is absent."""

    keyword = "required"
    description = "The field must be present in the input."
    failure = MissingRequiredField

    def _check(self, value: Any) -> Optional[ValidationError]:
        if is_absent(value):
            return self.fail("is required but was not submitted.", expected="a value", actual=None)
        return None
