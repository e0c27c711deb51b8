"""Normalize selector-or-element inputs into one resolve-or-fail result."""

from dataclasses import dataclass
from typing import Any

from .exceptions import ErrorKind, ResolutionFailure
from .host import StyleHost
from .models import ElementDescription


@dataclass
class Resolution:
    """Outcome of resolving a target against a host."""

    target: Any
    element: Any | None = None
    description: ElementDescription | None = None
    error: ErrorKind | None = None

    @property
    def found(self) -> bool:
        return self.error is None

    @property
    def selector(self) -> str | None:
        return self.description.selector if self.description else None


async def resolve_target(host: StyleHost, target: Any) -> Resolution:
    """
    Resolve a CSS selector or live element handle.

    Never raises: unresolvable or detached targets come back tagged
    ``ErrorKind.NOT_FOUND``.
    """
    element = await host.resolve(target)
    if element is None:
        return Resolution(target=target, error=ErrorKind.NOT_FOUND)

    try:
        description = await host.describe(element)
    except ResolutionFailure:
        return Resolution(target=target, error=ErrorKind.NOT_FOUND)

    return Resolution(target=target, element=element, description=description)
