"""Matches a field against a caller-supplied regular expression.

The pattern is everything after the first colon of the token, so
``regex:^\\d{2}:\\d{2}$`` keeps its inner colon. Matching is a search, not a
full match: anchor the pattern with ``^...$`` to constrain the whole value.
Integer values are matched against their decimal string form.
"""
import re
from typing import Any, Optional

from ..core.base_predicate import BasePredicate, is_int
from ..core.errors import ConfigurationError, PatternMismatch, ValidationError


class RegexPredicate(BasePredicate):
    keyword = "regex"
    description = "The value (or an integer's decimal form) must match the pattern."
    takes_param = True
    failure = PatternMismatch

    def _configure(self, param: Optional[str]) -> None:
        try:
            self._regex = re.compile(param or "")
        except re.error as e:
            raise ConfigurationError(
                f"Rule 'regex' has an invalid pattern: {e}", rule=f"regex:{param}", field=self.field_name
            ) from e

    def _check(self, value: Any) -> Optional[ValidationError]:
        if isinstance(value, str):
            text = value
        elif is_int(value):
            text = str(value)
        else:
            return self.type_mismatch(value, "a string or an integer")

        if self._regex.search(text) is None:
            return self.fail(f"did not match the pattern '{self.param}'.", expected=self.param, actual=value)
        return None
