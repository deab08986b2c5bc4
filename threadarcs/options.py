"""Diagram configuration and process-wide defaults."""

from __future__ import annotations

import copy
import numbers
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from .validate import ValidationError

HORIZONTAL = "horizontal"
VERTICAL = "vertical"

# Spellings used by the browser version of the diagram.
_ALIASES = {
    "maxArcHeight": "max_arc_height",
    "axisPos": "axis_pos",
    "disableTooltip": "disable_tooltip",
    "lambda": "lambda_",
    "restoreDelay": "restore_delay",
    "fadeDelay": "fade_delay",
    "hideDelay": "hide_delay",
}


@dataclass
class ThreadArcsOptions:
    """Layout and interaction knobs.

    ``padding``, ``axis_pos`` and ``size`` default to values derived from
    ``space`` and ``max_arc_height``; :meth:`resolved` fills them in.
    """

    space: float = 40.0
    max_arc_height: float = 100.0
    padding: Optional[float] = None
    lambda_: float = 0.5
    radius: float = 5.0
    orientation: str = HORIZONTAL
    axis_pos: Optional[float] = None
    size: Optional[float] = None
    disable_tooltip: bool = False
    restore_delay: float = 0.3
    fade_delay: float = 0.5
    hide_delay: float = 0.3
    precision: int = 2

    def __post_init__(self) -> None:
        for name in ("space", "max_arc_height", "lambda_", "radius"):
            _require_positive(name, getattr(self, name))
        for name in ("padding", "axis_pos", "size"):
            value = getattr(self, name)
            if value is not None:
                _require_number(name, value)
        for name in ("restore_delay", "fade_delay", "hide_delay"):
            value = getattr(self, name)
            _require_number(name, value)
            if value < 0:
                raise ValidationError(f"option {name!r} must not be negative (got {value})")
        if self.orientation not in (HORIZONTAL, VERTICAL):
            raise ValidationError(
                f"option 'orientation' must be {HORIZONTAL!r} or {VERTICAL!r} (got {self.orientation!r})"
            )
        if not isinstance(self.disable_tooltip, bool):
            raise ValidationError("option 'disable_tooltip' must be boolean")
        if isinstance(self.precision, bool) or not isinstance(self.precision, int) or self.precision < 0:
            raise ValidationError(f"option 'precision' must be a non-negative integer (got {self.precision!r})")

    @property
    def is_vertical(self) -> bool:
        return self.orientation == VERTICAL

    def resolved(self) -> "ThreadArcsOptions":
        return replace(
            self,
            padding=self.space / 2 if self.padding is None else self.padding,
            axis_pos=self.max_arc_height if self.axis_pos is None else self.axis_pos,
            size=self.max_arc_height * 2 if self.size is None else self.size,
        )

    @classmethod
    def from_mapping(
        cls,
        values: Optional[Mapping[str, Any]] = None,
        *,
        base: Optional["ThreadArcsOptions"] = None,
    ) -> "ThreadArcsOptions":
        """Build options from a plain mapping (snake_case or camelCase keys)."""

        base = base if base is not None else get_default_options()
        known = {field.name for field in fields(cls)}
        updates: Dict[str, Any] = {}
        for key, value in (values or {}).items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ValidationError(f"unknown option {key!r}")
            updates[name] = value
        return replace(base, **updates).resolved()


def _require_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"option {name!r} must be a number (got {value!r})")


def _require_positive(name: str, value: Any) -> None:
    _require_number(name, value)
    if value <= 0:
        raise ValidationError(f"option {name!r} must be positive (got {value})")


_DEFAULT_OPTIONS = ThreadArcsOptions()


def get_default_options() -> ThreadArcsOptions:
    return copy.deepcopy(_DEFAULT_OPTIONS)


def set_default_options(options: ThreadArcsOptions) -> None:
    global _DEFAULT_OPTIONS
    _DEFAULT_OPTIONS = copy.deepcopy(options)
