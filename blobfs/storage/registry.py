"""Backend kind registry.

Backends register a dial function and a config validator under a kind name;
callers open a location with dial(kind, config) without importing the
backend module themselves.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from blobfs.storage.backends.base import Location

DialFn = Callable[[Any], "Location"]
ValidateFn = Callable[[Any], Any]

_KINDS: dict[str, tuple[DialFn, ValidateFn]] = {}


def register(kind: str, dial_fn: DialFn, validate_fn: ValidateFn) -> None:
    """Register a backend kind.

    Args:
        kind: Kind name, e.g. "local".
        dial_fn: Opens a Location from a config.
        validate_fn: Validates a config, raising on invalid input.
    """
    _KINDS[kind] = (dial_fn, validate_fn)


def kinds() -> list[str]:
    """Names of all registered kinds, sorted."""
    return sorted(_KINDS)


def _lookup(kind: str) -> tuple[DialFn, ValidateFn]:
    try:
        return _KINDS[kind]
    except KeyError:
        raise ValueError(f"unknown storage kind: {kind!r}") from None


def validate(kind: str, config: Any) -> Any:
    """Validate a config for a kind without opening a location."""
    _, validate_fn = _lookup(kind)
    return validate_fn(config)


def dial(kind: str, config: Any) -> Location:
    """Open a location of the given kind.

    Args:
        kind: Registered kind name.
        config: Mapping or config model accepted by the kind.

    Returns:
        An open Location.

    Raises:
        ValueError: If the kind is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    dial_fn, _ = _lookup(kind)
    return dial_fn(config)
