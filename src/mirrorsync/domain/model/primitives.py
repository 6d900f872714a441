"""Domain primitives: scalar aliases + small helpers."""

from __future__ import annotations

type ChapterNumber = float
type SourceId = str
type AttributionLabel = str


def format_chapter_number(number: ChapterNumber) -> str:
    """Render whole numbers without a fractional part (``5.0`` -> ``"5"``)."""

    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def is_whole_number(number: ChapterNumber, *, epsilon: float) -> bool:
    """Return whether ``number`` lies within ``epsilon`` of an integer."""

    return abs(number - round(number)) <= epsilon
