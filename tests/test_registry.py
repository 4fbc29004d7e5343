"""Tests for codemorph.registry module."""

from typing import Any

import pytest

from codemorph.errors import ConflictingRegistrationError, UnsupportedOperationError
from codemorph.registry import DISABLED, MethodRegistry
from codemorph.types import NamedType


def first(collection: Any) -> Any:
    """Stand-in collection method."""
    return "first"


def second(collection: Any) -> Any:
    """Another stand-in collection method."""
    return "second"


class TestRegistration:
    """Test registering methods."""

    def test_universal_method(self) -> None:
        """Test that a universal method resolves for any types."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first})
        assert registry.resolve("describe", ()) is first
        assert registry.resolve("describe", ("Literal",)) is first

    def test_typed_method(self) -> None:
        """Test that a typed method resolves only for its kind."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, "Identifier")
        assert registry.resolve("describe", ("Identifier", "Expression")) is first
        with pytest.raises(UnsupportedOperationError) as exc_info:
            registry.resolve("describe", ("Literal", "Expression", "Node"))
        assert exc_info.value.method == "describe"
        assert list(exc_info.value.supported_types) == ["Identifier"]

    def test_named_type_argument(self) -> None:
        """Test that kinds may be given as NamedType."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, NamedType("Literal"))
        assert registry.resolve("describe", ("Literal",)) is first

    def test_same_name_on_unrelated_kinds(self) -> None:
        """Test that unrelated kinds may each have an implementation."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, "Identifier")
        registry.register_methods({"describe": second}, "Literal")
        assert registry.resolve("describe", ("Literal", "Expression")) is second
        assert registry.resolve("describe", ("Identifier",)) is first

    def test_first_registration_wins(self) -> None:
        """Test that dispatch scans registrations in order."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, "Identifier")
        registry.register_methods({"describe": second}, "Literal")
        assert registry.resolve("describe", ("Literal", "Identifier")) is first

    def test_supertypes_are_disabled(self) -> None:
        """Test that registering a kind blocks its supertypes."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, "JSXIdentifier")
        assert registry._typed["describe"]["Identifier"] is DISABLED
        assert registry._typed["describe"]["Node"] is DISABLED
        with pytest.raises(UnsupportedOperationError):
            registry.resolve("describe", ("Identifier", "Node"))

    def test_reregistering_same_method_is_skipped(self) -> None:
        """Test that registering the same implementation again is harmless."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, "Identifier")
        registry.register_methods({"describe": first}, "Identifier")
        assert registry.resolve("describe", ("Identifier",)) is first

    def test_unknown_method(self) -> None:
        """Test that unknown names raise AttributeError."""
        with pytest.raises(AttributeError, match="No collection method named 'nope'"):
            MethodRegistry().resolve("nope", ("Node",))


class TestConflicts:
    """Test conflicting registrations."""

    @pytest.mark.parametrize(
        ("existing", "new", "reason"),
        [
            (None, None, "a universal method with this name exists"),
            (None, "Identifier", "a universal method with this name exists"),
            ("Identifier", None, "typed methods with this name exist"),
            ("Identifier", "Identifier", "the type already has a registration"),
            ("Identifier", "Expression", "a subtype already has a registration"),
            ("Expression", "Identifier", "supertype 'Expression' already has a registration"),
        ],
    )
    def test_conflicts(self, existing: str | None, new: str | None, reason: str) -> None:
        """Test every kind of overlapping registration."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, existing)
        assert registry.has_conflicting_registration("describe", new)
        with pytest.raises(ConflictingRegistrationError, match=reason):
            registry.register_methods({"describe": second}, new)

    def test_collection_member_names(self) -> None:
        """Test that built-in Collection members cannot be shadowed."""
        registry = MethodRegistry()
        with pytest.raises(ConflictingRegistrationError, match="built-in Collection member"):
            registry.register_methods({"filter": first})

    def test_failed_batch_registers_nothing(self) -> None:
        """Test that a conflicting batch leaves the registry unchanged."""
        registry = MethodRegistry()
        registry.register_methods({"taken": first})
        with pytest.raises(ConflictingRegistrationError):
            registry.register_methods({"fresh": first, "taken": second})
        assert "fresh" not in registry.names()

    def test_no_conflict(self) -> None:
        """Test that unrelated names never conflict."""
        registry = MethodRegistry()
        registry.register_methods({"describe": first}, "Identifier")
        assert not registry.has_conflicting_registration("other", "Identifier")
        assert not registry.has_conflicting_registration("describe", "Literal")


class TestRegistryState:
    """Test defaults and plugins."""

    def test_fresh_registry(self) -> None:
        """Test that a new registry starts empty without a default type."""
        registry = MethodRegistry()
        assert registry.names() == []
        assert registry.default_collection_type is None

    def test_default_registry(self) -> None:
        """Test that the process default has the built-in methods."""
        registry = MethodRegistry.default()
        assert registry is MethodRegistry.default()
        assert "find" in registry.names()
        assert "rename_to" in registry.names()
        assert registry.default_collection_type == "Node"

    def test_set_default_type(self) -> None:
        """Test setting and clearing the default collection type."""
        registry = MethodRegistry()
        registry.set_default_collection_type(NamedType("Expression"))
        assert registry.default_collection_type == "Expression"
        registry.set_default_collection_type(None)
        assert registry.default_collection_type is None

    def test_use_runs_plugin_once(self) -> None:
        """Test that a plugin is applied once per registry."""
        calls: list[MethodRegistry] = []

        def plugin(registry: MethodRegistry) -> None:
            calls.append(registry)
            registry.register_methods({"plugged": first})

        registry = MethodRegistry()
        registry.use(plugin)
        registry.use(plugin)
        assert calls == [registry]
        assert registry.resolve("plugged", ()) is first
