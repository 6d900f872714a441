"""Defaults for chapter unification and display."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .env import env_flag
from .errors import ConfigurationError

HALF_CHAPTER_EPSILON: Final[float] = 1e-3

_SORT_KEYS = frozenset({"number", "date"})
_SORT_DIRECTIONS = frozenset({"ascending", "descending"})


@dataclass(frozen=True, slots=True)
class DisplayDefaults:
    """Display policy applied to newly created works."""

    show_all_duplicates: bool = False
    include_half_chapters: bool = True
    sort_key: str = "number"
    sort_direction: str = "descending"


def _env_choice(name: str, *, default: str, choices: frozenset[str]) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized not in choices:
        allowed = ", ".join(sorted(choices))
        raise ConfigurationError(f"Invalid value for {name}: {value!r} (expected {allowed})")
    return normalized


def get_display_defaults() -> DisplayDefaults:
    base = DisplayDefaults()
    return DisplayDefaults(
        show_all_duplicates=env_flag(
            "MIRRORSYNC_SHOW_ALL_DUPLICATES", default=base.show_all_duplicates
        ),
        include_half_chapters=env_flag(
            "MIRRORSYNC_INCLUDE_HALF_CHAPTERS", default=base.include_half_chapters
        ),
        sort_key=_env_choice("MIRRORSYNC_SORT_KEY", default=base.sort_key, choices=_SORT_KEYS),
        sort_direction=_env_choice(
            "MIRRORSYNC_SORT_DIRECTION",
            default=base.sort_direction,
            choices=_SORT_DIRECTIONS,
        ),
    )
