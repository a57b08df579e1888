"""Handles the core validation pipeline for tagval.

This module walks records and dispatches their rule strings:
1.  Discovering all available `BasePredicate` implementations.
2.  Introspecting a record's fields in declaration order.
3.  Recursing into nested records (and sequences of records) depth-first.
4.  Splitting each field's rule string into tokens and resolving every
    token to a predicate.
5.  Applying the absence policy, then running predicates left to right and
    stopping the whole traversal at the first failure.

It also provides `bind`, which reads and decodes JSON input into a record
before validating it.
"""

import importlib
import inspect
import logging
import os
import pkgutil
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from .base_predicate import BasePredicate
from .config import Config
from .errors import ConfigurationError, EmptyInputError, ValidationError
from .records import FieldInfo, is_record, iter_record_fields
from .rules import RuleToken, parse_rule
from .. import predicates as predicates_package
from ..utils.decoding import RecordDecoder, load_json, read_input

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

REQUIRED_KEYWORD = "required"
EMPTY_OBJECT = "{}"


def discover_predicates() -> Dict[str, Type[BasePredicate]]:
    """Discovers all predicate classes within the `tagval.predicates` package.

    This function iterates through the modules in the `predicates` package,
    inspects their members, and collects all classes that are subclasses of
    `BasePredicate` and declare a keyword. Intermediate base classes leave
    `keyword` empty and are skipped.

    Returns:
        Dict[str, Type[BasePredicate]]: The predicate classes keyed by keyword.

    Raises:
        ConfigurationError: If two different classes claim the same keyword.
    """
    catalogue: Dict[str, Type[BasePredicate]] = {}
    path = os.path.dirname(predicates_package.__file__)

    for _, name, _ in pkgutil.iter_modules([path]):
        module = importlib.import_module(f"{predicates_package.__name__}.{name}")
        for _, item in inspect.getmembers(module, inspect.isclass):
            if not issubclass(item, BasePredicate) or not item.keyword or inspect.isabstract(item):
                continue
            existing = catalogue.get(item.keyword)
            if existing is not None and existing is not item:
                raise ConfigurationError(
                    f"Rule keyword '{item.keyword}' is claimed by both "
                    f"{existing.__name__} and {item.__name__}",
                    rule=item.keyword,
                )
            catalogue[item.keyword] = item
    return catalogue


class Validator:
    """Validates records against the rule strings attached to their fields.

    A `Validator` holds only its configuration and the predicate catalogue,
    neither of which changes after construction, so one instance can be
    shared freely between threads.

    Attributes:
        config (Config): The configuration in effect.
        predicates (Dict[str, Type[BasePredicate]]): The predicate catalogue.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config.defaults()
        self.predicates = discover_predicates()
        self.metadata_key = self.config.get("metadata_key", "validate")
        self.fallback_keys = tuple(self.config.get("fallback_metadata_keys", []) or [])
        self.hoist_required = bool(self.config.get("hoist_required", True))
        self.recurse_sequences = bool(self.config.get("recurse_sequences", True))

    def validate(self, record: Any) -> Optional[ValidationError]:
        """Validates a record and returns the first failure.

        Anything that is not a record (a dataclass instance or a
        `FieldIterable`) has no fields to check and passes.

        Args:
            record (Any): The record to validate.

        Returns:
            Optional[ValidationError]: None when every rule holds, otherwise
            the first violation in depth-first field order.

        Raises:
            ConfigurationError: If a rule string is malformed.
        """
        logger.debug(f"Validating {type(record).__name__}")
        return self._validate_record(record, "")

    def _validate_record(self, record: Any, path: str) -> Optional[ValidationError]:
        fields = iter_record_fields(record, self.metadata_key, self.fallback_keys)
        if fields is None:
            return None

        for info in fields:
            where = f"{path}.{info.name}" if path else info.name

            failure = self._validate_children(info.value, where)
            if failure is not None:
                return failure

            if not info.rule:
                continue

            failure = self._apply_rules(info, where)
            if failure is not None:
                return failure
        return None

    def _validate_children(self, value: Any, where: str) -> Optional[ValidationError]:
        if is_record(value):
            return self._validate_record(value, where)
        if self.recurse_sequences and isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if is_record(item):
                    failure = self._validate_record(item, f"{where}[{index}]")
                    if failure is not None:
                        return failure
        return None

    def resolve(self, token: RuleToken, field_name: str) -> BasePredicate:
        """Builds the predicate for a rule token.

        Raises:
            ConfigurationError: If the keyword is unknown or its parameter
                is unusable.
        """
        predicate_cls = self.predicates.get(token.keyword)
        if predicate_cls is None:
            raise ConfigurationError(
                f"The rule '{token.raw}' is not a valid validation check", rule=token.raw, field=field_name
            )
        return predicate_cls(field_name, token.param, self.config)

    def _resolve_all(self, rule: str, where: str) -> List[BasePredicate]:
        try:
            return [self.resolve(token, where) for token in parse_rule(rule)]
        except ConfigurationError as e:
            logger.error(f"Invalid rule string '{rule}' on {where}: {e}")
            raise

    def _apply_rules(self, info: FieldInfo, where: str) -> Optional[ValidationError]:
        checks = self._resolve_all(info.rule, where)
        value = info.value if info.present else None

        if not info.present and self.hoist_required:
            # Only "required" can fail on an absent value, wherever it appears.
            checks = [check for check in checks if check.keyword == REQUIRED_KEYWORD][:1]

        for check in checks:
            if info.present and check.keyword == REQUIRED_KEYWORD:
                # Presence is reported by the record, not inferred from the value.
                continue
            if not info.present and check.keyword != REQUIRED_KEYWORD:
                logger.debug(f"{where} is absent and optional; skipping '{check.keyword}' and later rules")
                return None
            failure = check.check(value)
            if failure is not None:
                return failure
        return None

    def describe(self) -> Iterator[Tuple[str, Type[BasePredicate]]]:
        """Yields the catalogue sorted by keyword."""
        for keyword in sorted(self.predicates):
            yield keyword, self.predicates[keyword]

    def bind(self, source: Any, destination: Any) -> Any:
        """Reads JSON input, decodes it into a record and validates it.

        Args:
            source (Any): `bytes`, `str`, or a readable stream.
            destination (Any): A dataclass type (a new record is built) or
                a dataclass instance (updated in place).

        Returns:
            Any: The decoded, valid record.

        Raises:
            EmptyInputError: If the input is empty or an empty JSON object.
            DecodeError: If the input cannot be decoded into the record.
            ValidationError: If the record breaks one of its rules.
            ConfigurationError: If a rule string is malformed.
        """
        text = read_input(source)
        if text.strip() in ("", EMPTY_OBJECT):
            raise EmptyInputError()

        payload = load_json(text)
        record = RecordDecoder(self.config.get("name_key", "json")).decode(payload, destination)

        failure = self.validate(record)
        if failure is not None:
            raise failure
        return record


def validate_structured(record: Any, config: Optional[Config] = None) -> None:
    """Validates an already-decoded record.

    Raises:
        ValidationError: The first rule violation found.
        ConfigurationError: If a rule string is malformed.
    """
    failure = Validator(config).validate(record)
    if failure is not None:
        raise failure


def is_valid(record: Any, config: Optional[Config] = None) -> bool:
    """Returns True when the record satisfies all of its rules."""
    return Validator(config).validate(record) is None


def bind(source: Any, destination: Any, config: Optional[Config] = None) -> Any:
    """Decodes JSON input into `destination` and validates the result.

    See `Validator.bind`.
    """
    return Validator(config).bind(source, destination)
