"""
Base predicate class that all rule checks inherit from.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type, TYPE_CHECKING

from .errors import ConfigurationError, TypeMismatch, ValidationError

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


class BasePredicate(ABC):
    """Abstract base class for all rule predicates.

    A predicate implements the semantics of one rule keyword. The engine
    builds one instance per rule token, passing the token's parameter, and
    then calls `check` with the field's value. Subclasses implement
    `_check`, and may override `_configure` to parse their parameter once
    at construction time.

    Predicates other than `required` are never handed an absent value; the
    engine applies the absence policy before dispatching.

    Attributes:
        keyword (str): The rule keyword this predicate answers to.
        description (str): A brief explanation of what the predicate checks.
        takes_param (bool): Whether the keyword requires a `:param` payload.
        failure (Type[ValidationError]): The error class reported on failure.
    """

    keyword: str = ""
    description: str = "No description provided"
    takes_param: bool = False
    failure: Type[ValidationError] = ValidationError

    def __init__(self, field_name: str, param: Optional[str], config: "Config") -> None:
        """Initializes the predicate for one rule token.

        Args:
            field_name (str): The dotted path of the field being checked.
            param (Optional[str]): The text after the first colon of the
                token, or None for a bare keyword.
            config (Config): The engine's configuration object.

        Raises:
            ConfigurationError: If the parameter is missing, unexpected, or
                cannot be parsed.
        """
        if self.takes_param and param is None:
            raise ConfigurationError(f"Rule '{self.keyword}' requires a parameter", rule=self.keyword, field=field_name)
        if not self.takes_param and param is not None:
            raise ConfigurationError(
                f"Rule '{self.keyword}' does not take a parameter", rule=f"{self.keyword}:{param}", field=field_name
            )
        self.field_name = field_name
        self.param = param
        self.config = config
        self._configure(param)

    def _configure(self, param: Optional[str]) -> None:
        """Parses the parameter payload. The default accepts anything."""

    def check(self, value: Any) -> Optional[ValidationError]:
        """Runs the check against a field value.

        Returns:
            Optional[ValidationError]: None when the value passes, otherwise
            the failure describing why it did not.
        """
        outcome = self._check(value)
        if outcome is not None:
            logger.debug(f"Rule '{self.keyword}' failed on {self.field_name}: {outcome}")
        return outcome

    @abstractmethod
    def _check(self, value: Any) -> Optional[ValidationError]:
        """Abstract method implementing the predicate's semantics."""
        raise NotImplementedError("Subclasses must implement _check()")

    def fail(self, message: str, expected: Any = None, actual: Any = None) -> ValidationError:
        """Builds this predicate's failure for the current field."""
        return self.failure(
            f"The field {self.field_name} {message}",
            field=self.field_name,
            rule=self.keyword,
            expected=expected,
            actual=actual,
        )

    def type_mismatch(self, value: Any, expected: str) -> TypeMismatch:
        """Builds the failure for a rule declared against the wrong type."""
        return TypeMismatch(
            f"The rule '{self.keyword}' on {self.field_name} expects {expected}, "
            f"got {type(value).__name__}",
            field=self.field_name,
            rule=self.keyword,
            expected=expected,
            actual=value,
        )

    def parse_int(self, text: str) -> int:
        """Parses an integer parameter.

        Raises:
            ConfigurationError: If `text` is not an integer literal.
        """
        try:
            return int(text.strip())
        except ValueError:
            raise ConfigurationError(
                f"Rule '{self.keyword}' expects an integer parameter, got '{text}'",
                rule=f"{self.keyword}:{text}",
                field=self.field_name,
            ) from None

    def split_param(self) -> List[str]:
        """Splits a comma-separated parameter payload."""
        return (self.param or "").split(",")


def is_int(value: Any) -> bool:
    """True for integers, excluding booleans."""
    return isinstance(value, int) and not isinstance(value, bool)
