"""Reflection-based dependency injection.

Usage::

    from deployer.container import Container

    container = Container()
    servers = container.build(ServerRepository)

Every constructor parameter annotated with a concrete class is built
recursively.  Parameters annotated with anything else (``str``, ``int``,
unions including ``Optional[X]``, generic aliases, or nothing at all) fall
back to their default value.  A class-typed parameter whose class cannot be
built (abstract, protocol) also falls back to its default, and without one
the build fails with ``UnresolvableParameterError``.  Built instances are
never cached; only the reflection metadata is.

A container instance is meant for single-threaded use: the reflection cache
and the resolving set are plain instance state without a lock.
"""

from __future__ import annotations

import builtins
import importlib
import inspect
from dataclasses import dataclass
from typing import Any, Optional, TypeVar, Union, get_type_hints

import structlog

from deployer.errors import (
    CircularDependencyError,
    ContainerError,
    NotInstantiableError,
    UnknownTypeError,
    UnresolvableParameterError,
)

__all__ = ["Container", "ParameterInfo"]

log = structlog.get_logger(__name__)

T = TypeVar("T")

_EMPTY = inspect.Parameter.empty
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ParameterInfo:
    """Reflection metadata for a single constructor parameter.

    Attributes:
        name: The parameter name in the ``__init__`` signature.
        annotation: The resolved annotation, or ``None`` if it is missing or
            could not be evaluated.
        has_default: Whether the signature declares a default value.
        default: The default value (only meaningful if ``has_default``).
        positional_only: Declared before ``/`` and so passed positionally.
    """

    name: str
    annotation: Any
    has_default: bool
    default: Any = None
    positional_only: bool = False

    @property
    def buildable_type(self) -> Optional[type]:
        """The class the container should build for this parameter, if any."""
        annotation = self.annotation
        if not inspect.isclass(annotation):
            return None
        if annotation.__module__ == builtins.__name__:
            return None
        return annotation


class Container:
    """Builds class instances with auto-wired constructor dependencies."""

    def __init__(self) -> None:
        self._reflection_cache: dict[type, list[ParameterInfo]] = {}
        # dict rather than set: insertion order gives the dependency chain
        self._resolving: dict[type, None] = {}

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def build(self, type_: Union[type[T], str]) -> T:
        """Build an instance of ``type_`` with all dependencies resolved.

        Args:
            type_: A class, or a dotted import path such as
                ``"deployer.inventory.servers.ServerRepository"``.

        Returns:
            A new instance of the class.

        Raises:
            UnknownTypeError: ``type_`` cannot be imported or is not a class.
            NotInstantiableError: ``type_`` is abstract or a protocol.
            CircularDependencyError: ``type_`` transitively depends on itself.
            UnresolvableParameterError: A parameter has no default and either
                no buildable type or a type that could not be built.
        """
        cls = self._resolve_type(type_)

        if cls in self._resolving:
            chain = [_qualname(c) for c in self._resolving] + [_qualname(cls)]
            raise CircularDependencyError(chain)

        self._guard_instantiable(cls)
        parameters = self._get_parameters(cls)

        self._resolving[cls] = None
        try:
            args = []
            kwargs = {}
            for param in parameters:
                value = self._build_parameter(cls, param)
                if param.positional_only:
                    args.append(value)
                else:
                    kwargs[param.name] = value
            instance = cls(*args, **kwargs)
        finally:
            del self._resolving[cls]

        log.debug("container_built", type=_qualname(cls))
        return instance

    # ------------------------------------------------------------------
    # Parameter resolution
    # ------------------------------------------------------------------

    def _build_parameter(self, owner: type, param: ParameterInfo) -> Any:
        dependency = param.buildable_type

        if dependency is None:
            if param.has_default:
                return param.default
            raise UnresolvableParameterError(param.name, _qualname(owner))

        try:
            return self.build(dependency)
        except ContainerError as exc:
            if param.has_default:
                log.debug(
                    "container_default_used",
                    type=_qualname(owner),
                    parameter=param.name,
                    reason=str(exc),
                )
                return param.default
            if isinstance(exc, (CircularDependencyError, UnresolvableParameterError)):
                exc.add_context(param.name, _qualname(owner))
                raise
            raise UnresolvableParameterError(param.name, _qualname(owner), cause=exc) from exc

    # ------------------------------------------------------------------
    # Reflection caching
    # ------------------------------------------------------------------

    def _get_parameters(self, cls: type) -> list[ParameterInfo]:
        try:
            return self._reflection_cache[cls]
        except KeyError:
            parameters = self._reflect(cls)
            self._reflection_cache[cls] = parameters
            return parameters

    def _reflect(self, cls: type) -> list[ParameterInfo]:
        """Inspect ``cls.__init__`` and describe its parameters."""
        init = cls.__init__
        if init is object.__init__:
            return []

        try:
            signature = inspect.signature(init)
        except (TypeError, ValueError):
            return []

        hints = _type_hints(init, signature)

        result = []
        for index, (name, param) in enumerate(signature.parameters.items()):
            if index == 0 or param.kind in _VARIADIC:
                continue

            annotation = hints.get(name, param.annotation)
            if annotation is _EMPTY or isinstance(annotation, str):
                annotation = None

            result.append(
                ParameterInfo(
                    name=name,
                    annotation=annotation,
                    has_default=param.default is not _EMPTY,
                    default=None if param.default is _EMPTY else param.default,
                    positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                )
            )
        return result

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_type(type_: Union[type, str]) -> type:
        if isinstance(type_, str):
            module_name, _, attr = type_.rpartition(".")
            if not module_name:
                raise UnknownTypeError(f"Class [{type_}] does not exist")
            try:
                module = importlib.import_module(module_name)
                type_ = getattr(module, attr)
            except (ImportError, AttributeError) as exc:
                raise UnknownTypeError(f"Class [{type_}] does not exist") from exc

        if not inspect.isclass(type_):
            raise UnknownTypeError(f"Class [{type_!r}] does not exist")
        return type_

    @staticmethod
    def _guard_instantiable(cls: type) -> None:
        if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
            raise NotInstantiableError(f"Class [{_qualname(cls)}] is not instantiable")


def _qualname(cls: type) -> str:
    return cls.__qualname__


def _type_hints(init: Any, signature: inspect.Signature) -> dict[str, Any]:
    """Evaluate annotations of ``init``, one parameter at a time if needed.

    A single unresolvable forward reference (e.g. a ``TYPE_CHECKING``-only
    import) leaves just that parameter unannotated.
    """
    try:
        return get_type_hints(init)
    except (NameError, TypeError, AttributeError):
        pass

    globalns = getattr(init, "__globals__", {})
    hints = {}
    for name, param in signature.parameters.items():
        if param.annotation is _EMPTY:
            continue

        def holder() -> None: ...

        holder.__annotations__ = {name: param.annotation}
        try:
            hints.update(get_type_hints(holder, globalns=globalns))
        except (NameError, TypeError, AttributeError):
            continue
    return hints
