"""Checks a value against a fixed set of allowed literals (`in:a,b,c`)."""
from typing import Any, List, Optional

from ..core.base_predicate import BasePredicate, is_int
from ..core.errors import NotInAllowedSet, ValidationError


class InPredicate(BasePredicate):
    """Passes when the value equals one of the comma-separated literals.

    Surrounding whitespace is stripped from every literal, so `in:a, b`
    and `in:a,b` are the same list. String values are then compared
    exactly. Integer values are compared with every literal that parses as
    an integer; literals that do not parse simply never match an integer.
    """

    keyword = "in"
    description = "The value must be one of a comma-separated list of literals."
    takes_param = True
    failure = NotInAllowedSet

    def _configure(self, param: Optional[str]) -> None:
        self.options: List[str] = [option.strip() for option in self.split_param()]
        self.int_options = set()
        for option in self.options:
            try:
                self.int_options.add(int(option))
            except ValueError:
                continue

    def _check(self, value: Any) -> Optional[ValidationError]:
        if isinstance(value, str):
            matched = value in self.options
        elif is_int(value):
            matched = value in self.int_options
        else:
            return self.type_mismatch(value, "a string or an integer")

        if not matched:
            return self.fail(
                f"did not match any of the expected values ({', '.join(self.options)}).",
                expected=self.options,
                actual=value,
            )
        return None
