#!/usr/bin/env python3
"""
Result callback registry for formhook.

Callback implementations declare themselves with the :func:`result_callback`
decorator under a stable identifier. The registry is a read-only snapshot of
those declarations, built once per process (after loading the builtin
callbacks and any plugin directories) and shared by every dispatch.

Identifiers are stored in handler configurations. Renaming or moving a
callback class changes its default identifier and orphans those configurations,
so pass an explicit identifier when a class may move.
"""

import importlib
import importlib.util
import inspect
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set, Type, Union

from .config import get_config
from .domain.protocols import ResultCallback
from .errors import DuplicateCallbackError
from .logging import get_logger

logger = get_logger(__name__)

BUILTIN_CALLBACK_MODULES = ("formhook.builtin_callbacks.log_result",)

CallbackType = Type[ResultCallback]

# Process-wide declaration table, append-only
_declared: Dict[str, CallbackType] = {}
_declared_lock = threading.Lock()


def default_identifier(callback_type: type) -> str:
    """Fully qualified name used when no explicit identifier is given."""
    return f"{callback_type.__module__}.{callback_type.__qualname__}"


def declare_callback(callback_type: CallbackType, identifier: Optional[str] = None) -> str:
    """Add a callback class to the declaration table.

    Args:
        callback_type: ResultCallback subclass
        identifier: Stable identifier (defaults to the qualified class name)

    Returns:
        The identifier the class was declared under

    Raises:
        TypeError: If the class is not a ResultCallback
        DuplicateCallbackError: If another class already owns the identifier
    """
    if not (inspect.isclass(callback_type) and issubclass(callback_type, ResultCallback)):
        raise TypeError(f"{callback_type!r} is not a ResultCallback subclass")

    key = identifier or default_identifier(callback_type)

    with _declared_lock:
        existing = _declared.get(key)
        if existing is not None and existing is not callback_type:
            # Re-executing a plugin file yields a new class object for the same definition
            if default_identifier(existing) != default_identifier(callback_type):
                raise DuplicateCallbackError(
                    f"Callback identifier '{key}' is already declared by "
                    f"{default_identifier(existing)}"
                )
        _declared[key] = callback_type

    callback_type.callback_id = key
    logger.debug("Result callback declared", identifier=key)
    return key


def result_callback(
    identifier: Union[str, CallbackType, None] = None,
) -> Union[CallbackType, Callable[[CallbackType], CallbackType]]:
    """Class decorator declaring a result callback.

    Usable bare (``@result_callback``) or with an explicit identifier
    (``@result_callback("crm.lead-created")``).
    """
    if inspect.isclass(identifier):
        declare_callback(identifier)
        return identifier

    def decorator(callback_type: CallbackType) -> CallbackType:
        declare_callback(callback_type, identifier)
        return callback_type

    return decorator


def declarations() -> Dict[str, CallbackType]:
    """Snapshot of the declaration table."""
    with _declared_lock:
        return dict(_declared)


def is_zero_arg_constructible(callback_type: type) -> bool:
    """Whether a class can be instantiated without arguments."""
    if inspect.isabstract(callback_type):
        return False
    try:
        signature = inspect.signature(callback_type)
    except (TypeError, ValueError):
        return True

    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param.default is param.empty:
            return False
    return True


@dataclass(frozen=True)
class CallbackDescriptor:
    """A registered callback implementation."""

    identifier: str
    callback_type: CallbackType
    description: str = ""

    @classmethod
    def for_type(cls, identifier: str, callback_type: CallbackType) -> "CallbackDescriptor":
        doc = inspect.getdoc(callback_type) or ""
        return cls(
            identifier=identifier,
            callback_type=callback_type,
            description=doc.splitlines()[0] if doc else "",
        )

    def create(self) -> ResultCallback:
        return self.callback_type()


class CallbackRegistry:
    """Read-only index of result callbacks by identifier."""

    def __init__(self, descriptors: Iterable[CallbackDescriptor] = ()):
        self._descriptors: Mapping[str, CallbackDescriptor] = MappingProxyType(
            {descriptor.identifier: descriptor for descriptor in descriptors}
        )

    @classmethod
    def from_declarations(
        cls, declared: Optional[Mapping[str, CallbackType]] = None
    ) -> "CallbackRegistry":
        """Snapshot declared callbacks, skipping ones that need constructor arguments."""
        if declared is None:
            declared = declarations()

        descriptors = []
        for identifier, callback_type in declared.items():
            if not is_zero_arg_constructible(callback_type):
                logger.debug(
                    "Skipping result callback (not zero-argument constructible)",
                    identifier=identifier,
                )
                continue
            descriptors.append(CallbackDescriptor.for_type(identifier, callback_type))

        return cls(descriptors)

    @classmethod
    def build(cls, plugin_dirs: Optional[List[Path]] = None) -> "CallbackRegistry":
        """Load builtin and plugin-directory callbacks, then snapshot them."""
        for module_name in BUILTIN_CALLBACK_MODULES:
            importlib.import_module(module_name)

        for plugin_dir in plugin_dirs or []:
            load_plugin_dir(plugin_dir)

        registry = cls.from_declarations()
        logger.info("Callback registry built", callbacks=len(registry))
        return registry

    def resolve(self, identifier: str) -> Optional[ResultCallback]:
        """Create the callback registered under an identifier.

        Returns:
            A new callback instance, or None if nothing usable is registered
        """
        descriptor = self._descriptors.get(identifier)
        if descriptor is None:
            return None

        try:
            return descriptor.create()
        except Exception as e:
            logger.warning(
                "Failed to instantiate result callback",
                identifier=identifier,
                error=str(e),
            )
            return None

    def list_all(self) -> Set[str]:
        """Identifiers of all registered callbacks."""
        return set(self._descriptors)

    def get_descriptor(self, identifier: str) -> Optional[CallbackDescriptor]:
        return self._descriptors.get(identifier)

    def descriptors(self) -> List[CallbackDescriptor]:
        return sorted(self._descriptors.values(), key=lambda d: d.identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


def load_plugin_dir(plugin_dir: Path) -> int:
    """Execute every plugin file in a directory so its callbacks get declared.

    Returns:
        Number of files loaded successfully
    """
    if not plugin_dir.is_dir():
        logger.debug("Plugin directory not found", directory=str(plugin_dir))
        return 0

    loaded = 0
    for plugin_file in sorted(plugin_dir.glob("*.py")):
        if plugin_file.name.startswith("__"):
            continue
        try:
            _load_plugin_file(plugin_file)
            loaded += 1
        except Exception as e:
            logger.warning("Failed to load plugin", file=str(plugin_file), error=str(e))
    return loaded


def _load_plugin_file(plugin_file: Path) -> None:
    """Load a plugin from a Python file."""
    module_name = f"formhook_plugin_{plugin_file.stem}"

    spec = importlib.util.spec_from_file_location(module_name, plugin_file)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load module from {plugin_file}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise


# Global callback registry
_registry: Optional[CallbackRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> CallbackRegistry:
    """Get the process-wide callback registry, building it on first use."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = CallbackRegistry.build(get_config().plugin_dir_paths())
    return _registry


def refresh_registry() -> CallbackRegistry:
    """Rebuild the process-wide registry (picks up newly declared callbacks)."""
    global _registry
    with _registry_lock:
        _registry = CallbackRegistry.build(get_config().plugin_dir_paths())
    return _registry


def reset_registry() -> None:
    """Drop the process-wide registry (useful for testing)."""
    global _registry
    with _registry_lock:
        _registry = None
