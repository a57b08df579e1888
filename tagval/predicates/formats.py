"""Format checks for string fields: email, url and character classes.

Each predicate here is a fixed regular expression applied to a string. The
email pattern can be overridden with the `predicates.email.pattern` setting;
the others are fixed.
"""
import re
from typing import Any, Optional

from ..core.base_predicate import BasePredicate
from ..core.config import EMAIL_PATTERN
from ..core.errors import InvalidFormat, ValidationError

URL_PATTERN = r"^(https?://)?[\da-z.-]+\.[a-z.]{2,6}[/\w .-]*/?$"


class FormatPredicate(BasePredicate):
    """Base for predicates that match a string against a fixed pattern.

    Attributes:
        pattern (str): The regular expression to apply.
        full_match (bool): Whether the whole string must match, or any
            substring may.
        label (str): A human-readable name for the format in messages.
    """

    failure = InvalidFormat
    pattern: str = ""
    full_match: bool = True
    label: str = "value"

    def _configure(self, param: Optional[str]) -> None:
        self._regex = re.compile(self._pattern())

    def _pattern(self) -> str:
        return self.pattern

    def _check(self, value: Any) -> Optional[ValidationError]:
        if not isinstance(value, str):
            return self.type_mismatch(value, "a string")
        matcher = self._regex.fullmatch if self.full_match else self._regex.search
        if matcher(value) is None:
            return self.fail(f"is not a valid {self.label}.", expected=self.label, actual=value)
        return None


class EmailPredicate(FormatPredicate):
    keyword = "email"
    description = "The value must be an email address."
    label = "email address"

    def _pattern(self) -> str:
        return self.config.get("predicates.email.pattern", EMAIL_PATTERN)


class UrlPredicate(FormatPredicate):
    keyword = "url"
    description = "The value must be an http(s) URL; the scheme is optional."
    pattern = URL_PATTERN
    label = "URL"


class AlphaPredicate(FormatPredicate):
    keyword = "alpha"
    description = "The value must contain at least one letter."
    # Any Unicode letter: a word character that is neither a digit nor "_".
    pattern = r"[^\W\d_]"
    full_match = False
    label = "alphabetic value"


class AlphaDashPredicate(FormatPredicate):
    keyword = "alphadash"
    description = "The value may only contain ASCII letters, digits and underscores."
    pattern = r"[a-zA-Z0-9_]*"
    label = "alpha-dash value"


class AlphaNumericPredicate(FormatPredicate):
    keyword = "alphanumeric"
    description = "The value must contain at least one ASCII letter or digit."
    pattern = r"[0-9a-zA-Z]"
    full_match = False
    label = "alphanumeric value"
