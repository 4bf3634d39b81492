"""Persistence of the match collection as a single JSON document."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog
from pydantic import TypeAdapter, ValidationError

from scorer.logic.state import Match

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.storage import DocumentStorage

logger = structlog.get_logger()

DEFAULT_MATCHES_DOCUMENT = "matches"

_MATCH_LIST = TypeAdapter(list[Match])


class MatchStore(Protocol):
    """Load and save the full collection of matches."""

    def load_all(self) -> list[Match]: ...

    def save_all(self, matches: Sequence[Match]) -> None: ...


class JsonMatchStore:
    """
    Stores every match, rounds included, in one JSON array document.

    A missing document means no matches yet. A document that cannot be read
    or does not validate is reported as a warning and treated the same way,
    so callers never receive partially valid matches.
    """

    def __init__(self, storage: DocumentStorage, document: str = DEFAULT_MATCHES_DOCUMENT) -> None:
        self._storage = storage
        self._document = document

    def load_all(self) -> list[Match]:
        try:
            content = self._storage.load_document(self._document)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("match data unreadable, starting empty", document=self._document, error=str(exc))
            return []
        if content is None:
            return []
        try:
            return _MATCH_LIST.validate_json(content)
        except ValidationError as exc:
            logger.warning(
                "match data invalid, starting empty",
                document=self._document,
                error_count=exc.error_count(),
            )
            return []

    def save_all(self, matches: Sequence[Match]) -> None:
        content = _MATCH_LIST.dump_json(list(matches), indent=2).decode("utf-8")
        self._storage.save_document(self._document, content)
