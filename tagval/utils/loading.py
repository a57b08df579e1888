"""Resolves record type references given on the command line.

A reference is either ``package.module:ClassName`` (imported normally) or
``path/to/file.py:ClassName`` (loaded from the file). Nested classes may be
named with dots, e.g. ``models:Outer.Inner``.
"""
import dataclasses
import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

logger = logging.getLogger(__name__)


def _load_module_from_file(path: Path) -> ModuleType:
    """Imports a Python source file as a module.

    The module is registered in `sys.modules` before execution so that
    dataclasses and type hints defined in it can resolve their own module.
    """
    if not path.is_file():
        raise ValueError(f"No such file: {path}")
    module_name = f"tagval_target_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def load_record_type(target: str) -> type:
    """Resolves a ``module:Class`` or ``file.py:Class`` reference.

    Args:
        target (str): The reference to resolve.

    Returns:
        type: The dataclass type it names.

    Raises:
        ValueError: If the reference is malformed, cannot be imported, or
            does not name a dataclass type.
    """
    module_ref, sep, attr_path = target.rpartition(":")
    if not sep or not module_ref or not attr_path:
        raise ValueError(f"Expected 'module:Class' or 'file.py:Class', got '{target}'")

    logger.debug(f"Loading record type {attr_path} from {module_ref}")
    if module_ref.endswith(".py"):
        module = _load_module_from_file(Path(module_ref))
    else:
        try:
            module = importlib.import_module(module_ref)
        except ImportError as e:
            raise ValueError(f"Cannot import module '{module_ref}': {e}") from e

    obj = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"'{module_ref}' has no attribute '{attr_path}'") from None

    if not (isinstance(obj, type) and dataclasses.is_dataclass(obj)):
        raise ValueError(f"'{target}' is not a dataclass type")
    return obj
