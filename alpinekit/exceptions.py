"""alpinekit exception hierarchy.

All alpinekit-specific exceptions inherit from AlpineKitException, enabling
catch-all handling while supporting specific error types.
"""

from __future__ import annotations

from typing import Any


class AlpineKitException(Exception):
    """Base exception for all alpinekit errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize alpinekit exception.

        Parameters
        ----------
        message : str
            Human-readable error message.
        **context : Any
            Additional context (component, tag, expression, etc.).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Format exception with context."""
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ComponentError(AlpineKitException):
    """A component could not be built from the given input.

    Raised for misconfigured components, e.g. a template tag missing an
    attribute it cannot do without.
    """

    def __init__(self, message: str, component: str | None = None, **context: Any) -> None:
        """Initialize component error.

        Parameters
        ----------
        message : str
            Human-readable error message.
        component : str, optional
            The component (or tag) name involved.
        **context : Any
            Additional context.
        """
        super().__init__(message, component=component, **context)
        self.component = component


class TemplateBindingError(ComponentError):
    """A template tag referenced a value missing from the render context.

    Raised when an ``options-source`` or ``for`` path cannot be resolved.
    """

    def __init__(
        self,
        message: str,
        expression: str,
        component: str | None = None,
        **context: Any,
    ) -> None:
        """Initialize binding error.

        Parameters
        ----------
        message : str
            Human-readable error message.
        expression : str
            The dotted path that failed to resolve.
        component : str, optional
            The tag name involved.
        **context : Any
            Additional context.
        """
        super().__init__(message, component=component, expression=expression, **context)
        self.expression = expression
