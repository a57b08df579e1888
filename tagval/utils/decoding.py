"""Turns raw JSON input into dataclass records.

This module handles the steps that come before validation: reading the
input (bytes, text or a readable stream), parsing it with the standard
`json` module, and decoding the resulting object into a dataclass record.

Decoding happens in two passes. A key-folding pass walks the record type
and rewrites each JSON object into the shape the record expects:

*   keys are matched to fields by JSON name (the `json` metadata entry, or
    the attribute name), exactly first and then case-insensitively;
*   unknown keys, and fields named ``"-"``, are ignored;
*   missing keys take the field default, or `None` when there is none.

The folded payload is then handed to a `pydantic.TypeAdapter` for the
record type in strict mode, which builds the record and rejects any value
whose JSON type does not fit the field's annotation. `null` is accepted
wherever the annotation admits `None`.
"""
import dataclasses
import json
import logging
import types
import typing
from typing import Any, Dict, Optional, Sequence, Tuple

import pydantic

from ..core.errors import ConfigurationError, DecodeError
from ..core.records import DEFAULT_NAME_KEY

logger = logging.getLogger(__name__)

IGNORED_NAME = "-"


def read_input(source: Any) -> str:
    """Reads the whole input into a string.

    Args:
        source (Any): `bytes`, `str`, or any object with a `read()` method
            returning either.

    Returns:
        str: The decoded text.

    Raises:
        DecodeError: If the bytes are not valid UTF-8.
        TypeError: If `source` is none of the accepted kinds.
    """
    data = source.read() if hasattr(source, "read") else source
    if isinstance(data, (bytes, bytearray)):
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(str(e)) from e
    if isinstance(data, str):
        return data
    raise TypeError(f"Cannot read input of type {type(data).__name__}")


def load_json(text: str) -> Any:
    """Parses a JSON document, surfacing syntax errors as `DecodeError`."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(str(e)) from e


def json_type(value: Any) -> str:
    """Names the JSON type of a parsed value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _is_record_type(hint: Any) -> bool:
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)


def _strip_optional(hint: Any) -> Any:
    """Optional[X] is X for folding purposes; other unions are left alone."""
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        arms = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(arms) == 1:
            return arms[0]
    return hint


def _item_hint(hint: Any, index: int) -> Any:
    """The element annotation of a list, set or tuple annotation."""
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in (list, set, frozenset) and args:
        return args[0]
    if origin is tuple and args:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return args[index] if index < len(args) else Any
    return Any


def _has_default(field: dataclasses.Field) -> bool:
    return field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING


class RecordDecoder:
    """Decodes parsed JSON values into dataclass records.

    Attributes:
        name_key (str): The dataclass metadata key holding a field's JSON name.
    """

    def __init__(self, name_key: str = DEFAULT_NAME_KEY) -> None:
        self.name_key = name_key

    def decode(self, payload: Any, destination: Any) -> Any:
        """Decodes `payload` into a record.

        Args:
            payload (Any): A parsed JSON value; must be an object.
            destination (Any): A dataclass type, in which case a new instance
                is built, or a dataclass instance, which is updated in place
                with the keys present in `payload`.

        Returns:
            Any: The populated record.

        Raises:
            DecodeError: If the payload does not fit the record type.
            ConfigurationError: If the record type cannot be decoded into
                at all (an annotation pydantic does not understand).
            TypeError: If `destination` is not a dataclass type or instance.
        """
        if not dataclasses.is_dataclass(destination):
            raise TypeError(f"Cannot decode into {destination!r}: not a dataclass type or instance")
        cls = destination if isinstance(destination, type) else type(destination)
        if not isinstance(payload, dict):
            raise DecodeError(f"cannot decode {json_type(payload)} into {cls.__name__}")

        if isinstance(destination, type):
            return self._validate(cls, self._fold_object(cls, payload), ())
        self._populate(destination, payload)
        return destination

    def _hints(self, cls: type) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(cls)
        except (NameError, TypeError) as e:
            logger.debug(f"Could not resolve type hints for {cls.__name__}: {e}")
            return {}

    def _json_name(self, field: dataclasses.Field) -> str:
        return field.metadata.get(self.name_key, field.name)

    def _lookup(self, data: Dict[str, Any], key: str) -> Tuple[bool, Any]:
        if key in data:
            return True, data[key]
        folded = key.lower()
        for candidate, value in data.items():
            if candidate.lower() == folded:
                return True, value
        return False, None

    def _fold(self, value: Any, hint: Any) -> Any:
        """Rewrites every JSON object that lands on a record type, recursively."""
        if value is None:
            return None
        hint = _strip_optional(hint)
        if _is_record_type(hint):
            return self._fold_object(hint, value) if isinstance(value, dict) else value

        origin = typing.get_origin(hint)
        if isinstance(value, list) and origin in (list, set, frozenset, tuple):
            return [self._fold(item, _item_hint(hint, i)) for i, item in enumerate(value)]
        if isinstance(value, dict) and origin is dict:
            args = typing.get_args(hint)
            value_hint = args[1] if len(args) == 2 else Any
            return {key: self._fold(item, value_hint) for key, item in value.items()}
        return value

    def _fold_object(self, cls: type, data: Dict[str, Any]) -> Dict[str, Any]:
        hints = self._hints(cls)
        folded = {}
        for field in dataclasses.fields(cls):
            if not field.init:
                continue
            key = self._json_name(field)
            found, raw = (False, None) if key == IGNORED_NAME else self._lookup(data, key)
            if found:
                folded[field.name] = self._fold(raw, hints.get(field.name, Any))
            elif not _has_default(field):
                folded[field.name] = None
        return folded

    def _populate(self, instance: Any, data: Dict[str, Any]) -> None:
        hints = self._hints(type(instance))
        for field in dataclasses.fields(instance):
            key = self._json_name(field)
            if key == IGNORED_NAME:
                continue
            found, raw = self._lookup(data, key)
            if found:
                hint = hints.get(field.name, Any)
                value = self._validate(hint, self._fold(raw, hint), (field.name,), owner=type(instance))
                setattr(instance, field.name, value)

    def _validate(self, hint: Any, folded: Any, prefix: Tuple[Any, ...], owner: Optional[type] = None) -> Any:
        try:
            return pydantic.TypeAdapter(hint).validate_json(json.dumps(folded), strict=True)
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            root = owner if owner is not None else hint
            loc = prefix + tuple(error["loc"])
            raise DecodeError(error["msg"], self._path(root, loc)) from e
        except (pydantic.PydanticUserError, pydantic.PydanticUndefinedAnnotation) as e:
            raise ConfigurationError(f"Cannot decode into {hint!r}: {e}") from e

    def _path(self, hint: Any, loc: Sequence[Any]) -> str:
        """Translates a pydantic error location into a JSON path.

        Record fields are reported by JSON name. The walk stops at the first
        location element it cannot follow, such as a union member tag.
        """
        path = ""
        for item in loc:
            hint = _strip_optional(hint)
            origin = typing.get_origin(hint)
            if _is_record_type(hint) and isinstance(item, str):
                fields = {field.name: field for field in dataclasses.fields(hint)}
                if item not in fields:
                    break
                path = _join(path, self._json_name(fields[item]))
                hint = self._hints(hint).get(item, Any)
            elif isinstance(item, int) and origin in (list, set, frozenset, tuple):
                path = f"{path}[{item}]"
                hint = _item_hint(hint, item)
            elif isinstance(item, str) and origin is dict:
                path = _join(path, item)
                args = typing.get_args(hint)
                hint = args[1] if len(args) == 2 else Any
            else:
                break
        return path


def decode_record(payload: Any, destination: Any, name_key: Optional[str] = None) -> Any:
    """Decodes a parsed JSON object into a dataclass type or instance."""
    return RecordDecoder(name_key or DEFAULT_NAME_KEY).decode(payload, destination)
