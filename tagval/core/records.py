"""Record introspection.

The engine never knows concrete record types. It asks this module for the
fields of whatever it was given, as `FieldInfo` tuples carrying the name,
the rule string, the current value and whether that value is present.

Two shapes of record are understood:

*   Dataclass instances. The rule string lives in the field metadata, most
    conveniently attached with `rule()`::

        @dataclass
        class Register:
            username: Optional[str] = rule("required")
            email: Optional[str] = rule("required|email")

*   Any object implementing `FieldIterable`, for records that are not
    dataclasses (hand-written classes, wrappers around dicts, ...).
"""
import dataclasses
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, NamedTuple, Optional, Sequence

DEFAULT_METADATA_KEY = "validate"
DEFAULT_FALLBACK_KEYS = ("binding",)
DEFAULT_NAME_KEY = "json"


class FieldInfo(NamedTuple):
    """Everything the engine needs to know about one field."""

    name: str
    rule: Optional[str]
    value: Any
    present: bool


class FieldIterable(ABC):
    """Capability interface for records that are not dataclasses.

    Implementations yield one `FieldInfo` per field, in declaration order.
    """

    @abstractmethod
    def iter_fields(self) -> Iterable[FieldInfo]:
        raise NotImplementedError("Subclasses must implement iter_fields()")


def rule(text: str, json_name: Optional[str] = None, **kwargs: Any) -> Any:
    """Declares a dataclass field carrying a rule string.

    The field defaults to `None` (absent) unless `default` or
    `default_factory` is given.

    Args:
        text (str): The rule string, e.g. ``"required|email"``.
        json_name (Optional[str]): The JSON key to decode this field from,
            when it differs from the attribute name. ``"-"`` excludes the
            field from decoding.
        **kwargs: Passed through to `dataclasses.field`.

    Returns:
        Any: A `dataclasses.Field` to assign in the class body.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[DEFAULT_METADATA_KEY] = text
    if json_name is not None:
        metadata[DEFAULT_NAME_KEY] = json_name
    if "default" not in kwargs and "default_factory" not in kwargs:
        kwargs["default"] = None
    return dataclasses.field(metadata=metadata, **kwargs)


def is_absent(value: Any) -> bool:
    """A value is absent when it was never set or was explicitly null."""
    return value is None


def is_record(value: Any) -> bool:
    """True for dataclass instances and `FieldIterable` objects."""
    if isinstance(value, FieldIterable):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def rule_for(field: dataclasses.Field, metadata_key: str, fallback_keys: Sequence[str]) -> Optional[str]:
    """Looks up a dataclass field's rule string, honouring legacy keys."""
    text = field.metadata.get(metadata_key)
    if text:
        return text
    for key in fallback_keys:
        text = field.metadata.get(key)
        if text:
            return text
    return None


def iter_record_fields(
    record: Any,
    metadata_key: str = DEFAULT_METADATA_KEY,
    fallback_keys: Sequence[str] = DEFAULT_FALLBACK_KEYS,
) -> Optional[Iterator[FieldInfo]]:
    """Returns the fields of a record, or None if `record` is not one.

    Args:
        record (Any): The object to introspect.
        metadata_key (str): The dataclass metadata key holding rule strings.
        fallback_keys (Sequence[str]): Keys consulted when `metadata_key`
            is missing or empty.

    Returns:
        Optional[Iterator[FieldInfo]]: The fields in declaration order.
    """
    if isinstance(record, FieldIterable):
        return iter(record.iter_fields())
    if not is_record(record):
        return None
    return _dataclass_fields(record, metadata_key, fallback_keys)


def _dataclass_fields(record: Any, metadata_key: str, fallback_keys: Sequence[str]) -> Iterator[FieldInfo]:
    for field in dataclasses.fields(record):
        value = getattr(record, field.name, None)
        yield FieldInfo(
            name=field.name,
            rule=rule_for(field, metadata_key, fallback_keys),
            value=value,
            present=not is_absent(value),
        )
