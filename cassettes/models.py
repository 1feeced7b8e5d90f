"""Lightweight data structures for the tape catalog."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

DISPLAY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class Tape:
    """Represents one physical cassette in the catalog."""

    id: int
    title: str
    tape: str
    created_at: datetime

    @property
    def display_date(self) -> str:
        return self.created_at.strftime(DISPLAY_DATE_FORMAT)

    def to_dict(self) -> dict[str, int | str]:
        return {
            "id": self.id,
            "title": self.title,
            "tape": self.tape,
            "created_at": self.display_date,
        }
