"""Per-work display policy for the unified chapter list."""

from __future__ import annotations

from dataclasses import dataclass, replace

from mirrorsync.domain.model.enums import SortDirection, SortKey


@dataclass(frozen=True)
class DisplayPolicy:
    show_all_duplicates: bool = False
    include_half_chapters: bool = True
    sort_key: SortKey = SortKey.NUMBER
    sort_direction: SortDirection = SortDirection.DESCENDING

    @property
    def descending(self) -> bool:
        return self.sort_direction is SortDirection.DESCENDING

    def toggled(self, key: SortKey) -> DisplayPolicy:
        """Flip direction when ``key`` is already active, else switch key and sort descending."""

        if key is self.sort_key:
            return replace(self, sort_direction=self.sort_direction.toggled())
        return replace(self, sort_key=key, sort_direction=SortDirection.DESCENDING)

    def __composite_values__(self) -> tuple[bool, bool, SortKey, SortDirection]:
        """For SQLAlchemy composite columns (adapter-side convenience)."""
        return (
            self.show_all_duplicates,
            self.include_half_chapters,
            self.sort_key,
            self.sort_direction,
        )
