"""Registry of collection methods scoped to node kinds."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, ClassVar, Final, TypeAlias

from codemorph.errors import ConflictingRegistrationError, UnsupportedOperationError
from codemorph.types import ESTREE, NamedType, TypeLattice, kind_name

logger = logging.getLogger(__name__)

Method: TypeAlias = "Callable[..., Any]"


class _Disabled:
    """Marker for a kind whose registration slot is blocked by a subtype."""

    def __repr__(self) -> str:
        return "DISABLED"


DISABLED: Final = _Disabled()


class MethodRegistry:
    """Table of collection methods keyed by name and node kind.

    A method is either universal (available on every collection) or typed:
    registered for one or more kinds and available on collections whose
    inferred types include one of them. Registering a typed method blocks
    the kind's supertypes, so two registrations for one name never apply to
    kinds on the same inheritance chain.

    Implementations are plain functions taking the collection as their first
    argument. Collections look them up through `resolve`.

    Usage:
        registry = MethodRegistry()
        registry.register_methods({"names": lambda c: [...]}, "Identifier")
        registry.resolve("names", collection.types)
    """

    _default: ClassVar[MethodRegistry | None] = None

    def __init__(self, lattice: TypeLattice = ESTREE) -> None:
        """Initialize an empty registry.

        Args:
            lattice: Supertype relation used to check registrations

        """
        self.lattice = lattice
        self._universal: dict[str, Method] = {}
        self._typed: dict[str, dict[str, Method | _Disabled]] = {}
        self._default_type: str | None = None
        self._plugins: list[Callable[..., Any]] = []

    @classmethod
    def default(cls) -> MethodRegistry:
        """Get the process-wide registry with the built-in methods installed."""
        if cls._default is None:
            from codemorph.collections import register_builtins

            registry = cls()
            register_builtins(registry)
            cls._default = registry
        return cls._default

    @property
    def default_collection_type(self) -> str | None:
        """Kind given to collections built from no positions."""
        return self._default_type

    def set_default_collection_type(self, kind: str | NamedType | None) -> None:
        """Set the kind given to collections built from no positions."""
        self._default_type = None if kind is None else kind_name(kind)

    def register_methods(
        self,
        methods: Mapping[str, Method],
        type: str | NamedType | None = None,  # noqa: A002
    ) -> None:
        """Register collection methods.

        Args:
            methods: Implementations keyed by method name
            type: Kind the methods apply to; universal when omitted

        Raises:
            ConflictingRegistrationError: If any of the methods overlaps an
                existing registration. Nothing is registered in that case.

        """
        kind = None if type is None else kind_name(type)
        pending: list[tuple[str, Method]] = []
        for name, method in methods.items():
            if kind is not None and self._typed.get(name, {}).get(kind) is method:
                continue
            if (reason := self._conflict_reason(name, kind)) is not None:
                raise ConflictingRegistrationError(name, kind, reason)
            pending.append((name, method))

        for name, method in pending:
            if kind is None:
                self._universal[name] = method
                logger.debug("Registered universal method '%s'", name)
                continue
            registrations = self._typed.setdefault(name, {})
            registrations[kind] = method
            for supertype in self.lattice.supertypes(kind):
                registrations.setdefault(supertype, DISABLED)
            logger.debug("Registered method '%s' for type '%s'", name, kind)

    def has_conflicting_registration(
        self,
        name: str,
        type: str | NamedType | None = None,  # noqa: A002
    ) -> bool:
        """Check whether registering ``name`` for ``type`` would conflict."""
        kind = None if type is None else kind_name(type)
        return self._conflict_reason(name, kind) is not None

    def _conflict_reason(self, name: str, kind: str | None) -> str | None:
        from codemorph.collection import Collection

        if hasattr(Collection, name):
            return "the name is a built-in Collection member"
        if name in self._universal:
            return "a universal method with this name exists"
        registrations = self._typed.get(name)
        if kind is None:
            if registrations:
                return "typed methods with this name exist"
            return None
        if not registrations:
            return None

        if isinstance(registrations.get(kind), _Disabled):
            return "a subtype already has a registration"
        if kind in registrations:
            return "the type already has a registration"
        for supertype in self.lattice.supertypes(kind):
            if not isinstance(registrations.get(supertype, DISABLED), _Disabled):
                return f"supertype '{supertype}' already has a registration"
        return None

    def resolve(self, name: str, types: Iterable[str]) -> Method:
        """Find the implementation of ``name`` for a collection of ``types``.

        Typed registrations are tried in registration order; the first one
        whose kind is among ``types`` wins.

        Raises:
            AttributeError: If no method with that name is registered
            UnsupportedOperationError: If the method exists but not for
                any of ``types``

        """
        if (method := self._universal.get(name)) is not None:
            return method

        registrations = self._typed.get(name)
        if registrations is None:
            msg = f"No collection method named '{name}'"
            raise AttributeError(msg)

        types = tuple(types)
        for kind, method in registrations.items():
            if not isinstance(method, _Disabled) and kind in types:
                return method

        supported = [k for k, m in registrations.items() if not isinstance(m, _Disabled)]
        raise UnsupportedOperationError(name, types, supported)

    def names(self) -> list[str]:
        """Get every registered method name."""
        return [*self._universal, *self._typed]

    def use(self, plugin: Callable[..., Any], target: Any = None) -> bool:
        """Run ``plugin`` at most once per registry.

        Args:
            plugin: Callable installing methods
            target: Object handed to ``plugin``, this registry when omitted

        Returns:
            True if the plugin ran, False if it was already installed

        """
        if any(existing is plugin for existing in self._plugins):
            logger.debug("Plugin %r already installed", plugin)
            return False
        self._plugins.append(plugin)
        plugin(self if target is None else target)
        return True
