"""Configuration system for DazzleWalk.

This module defines how users tune a Walker: what to do when no binding
resolves, whether references are unwrapped transparently, whether
container bindings receive an end notification, and how record fields
are resolved.
"""

import copy
from dataclasses import dataclass
from typing import List, Optional

from .core.properties import DefaultPropertyResolver, PropertyResolver


@dataclass
class WalkConfig:
    """Complete configuration for a Walker.

    The Walker keeps its own clone of the configuration, so changing a
    config after building a Walker has no effect on it.
    """

    # Finish nodes silently when nothing resolves instead of raising
    ignore_missing_binding: bool = False

    # Re-enter non-nil references with their target when no binding matched
    auto_unwrap_pointer: bool = False

    # Call container bindings a second time once their children are done
    emit_container_end: bool = False

    # Record field resolution (None = DefaultPropertyResolver)
    property_resolver: Optional[PropertyResolver] = None

    @classmethod
    def lenient(cls) -> 'WalkConfig':
        """Create a config that skips unbound nodes and unwraps references.

        Returns:
            WalkConfig with ignore_missing_binding and auto_unwrap_pointer set
        """
        return cls(ignore_missing_binding=True, auto_unwrap_pointer=True)

    @classmethod
    def with_container_end(cls, **overrides) -> 'WalkConfig':
        """Create a config with container end notifications enabled.

        Args:
            **overrides: Any other WalkConfig field

        Returns:
            WalkConfig with emit_container_end set
        """
        return cls(emit_container_end=True, **overrides)

    def resolver(self) -> PropertyResolver:
        """Return the configured resolver or the default one."""
        if self.property_resolver is None:
            return DefaultPropertyResolver()
        return self.property_resolver

    def clone(self) -> 'WalkConfig':
        """Return a shallow copy; the resolver instance is shared."""
        return copy.copy(self)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for name in ("ignore_missing_binding", "auto_unwrap_pointer", "emit_container_end"):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be a bool")

        resolver = self.property_resolver
        if resolver is not None and not callable(getattr(resolver, "properties", None)):
            errors.append("property_resolver must provide a properties(record) method")

        return errors
