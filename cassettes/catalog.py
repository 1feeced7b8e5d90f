"""In-memory catalog backed by the tape store, plus the search projection.

The repository keeps the only copy of the record list and rebuilds it from
storage after every write. The projection reads that list on demand and never
stores its own.
"""

from __future__ import annotations

import logging
from typing import Sequence

from cassettes.db import TapeStore
from cassettes.errors import StorageError, ValidationError
from cassettes.models import Tape

logger = logging.getLogger(__name__)

STATUS_TEMPLATE = "{count} films référencés"


def _validate(title: str, tape: str) -> None:
    """Reject empty (or whitespace-only) fields before touching storage."""

    missing = [
        name for name, value in (("title", title), ("tape", tape)) if not value or not value.strip()
    ]
    if missing:
        logger.info(
            "Rejected tape with empty fields",
            extra={"event": "tape_validation_failed", "context": {"missing": missing}},
        )
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")


def matches_term(tape: Tape, term: str) -> bool:
    """Return True if the term is a case-insensitive substring of title or tape."""

    if not term:
        return True
    needle = term.casefold()
    return needle in tape.title.casefold() or needle in tape.tape.casefold()


class CatalogRepository:
    """Owns the authoritative list of tapes.

    All mutations go through :meth:`add`, :meth:`edit` and :meth:`delete`;
    each performs one storage write and then reloads the whole list before
    returning.
    """

    def __init__(self, store: TapeStore) -> None:
        self._store = store
        self._records: tuple[Tape, ...] = ()

    @property
    def records(self) -> tuple[Tape, ...]:
        return self._records

    @property
    def count(self) -> int:
        return len(self._records)

    def status_summary(self) -> str:
        return STATUS_TEMPLATE.format(count=self.count)

    def reload(self) -> tuple[Tape, ...]:
        """Replace the record list with a fresh scan of storage.

        On failure the previous list is kept and the StorageError propagates.
        """

        try:
            records = tuple(self._store.list_all())
        except StorageError as exc:
            logger.warning(
                "Catalog reload failed; keeping previous records",
                extra={
                    "event": "catalog_reload_failed",
                    "context": {"count": len(self._records), "error": str(exc)},
                },
            )
            raise
        self._records = records
        logger.debug(
            "Reloaded catalog",
            extra={"event": "catalog_reloaded", "context": {"count": len(records)}},
        )
        return self._records

    def add(self, title: str, tape: str) -> None:
        _validate(title, tape)
        tape_id = self._store.insert(title, tape)
        logger.info(
            "Tape created",
            extra={"event": "tape_created", "context": {"tape_id": tape_id}},
        )
        self.reload()

    def edit(self, tape_id: int, title: str, tape: str) -> None:
        _validate(title, tape)
        self._store.update(tape_id, title, tape)
        logger.info(
            "Tape updated",
            extra={"event": "tape_updated", "context": {"tape_id": tape_id}},
        )
        self.reload()

    def delete(self, tape_id: int) -> None:
        self._store.delete(tape_id)
        logger.info(
            "Tape deleted",
            extra={"event": "tape_deleted", "context": {"tape_id": tape_id}},
        )
        self.reload()

    def current_record(self, tape_id: int) -> Tape | None:
        """Look up a tape in the loaded list; None means the selection is stale."""

        for record in self._records:
            if record.id == tape_id:
                return record
        return None


class FilterProjection:
    """Search-as-you-type view over a :class:`CatalogRepository`.

    Setting the term is cheap; the subset is computed afresh on every call to
    :meth:`filtered_view`, always against the latest term and record list.
    """

    def __init__(self, repository: CatalogRepository) -> None:
        self._repository = repository
        self._term = ""

    @property
    def term(self) -> str:
        return self._term

    @property
    def is_filtering(self) -> bool:
        return bool(self._term)

    def set_term(self, term: str) -> None:
        self._term = term or ""

    def clear(self) -> None:
        self.set_term("")

    def filtered_view(self) -> Sequence[Tape]:
        records = self._repository.records
        term = self._term
        if not term:
            return records
        return tuple(record for record in records if matches_term(record, term))
