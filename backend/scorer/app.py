"""Composition root: wires settings, logging, storage and the match repository."""

import structlog

from scorer.session.match_store import JsonMatchStore
from scorer.session.repository import MatchRepository
from scorer.settings import ScorerSettings
from shared.logging import setup_logging
from shared.storage import LocalDocumentStorage

logger = structlog.get_logger()


def create_repository(settings: ScorerSettings | None = None) -> MatchRepository:
    """
    Build a ready-to-use repository with previously saved matches loaded.

    Call once per session and pass the result to whoever needs it.
    """
    if settings is None:
        settings = ScorerSettings()

    log_file = setup_logging(log_dir=settings.log_dir)

    storage = LocalDocumentStorage(settings.data_dir)
    store = JsonMatchStore(storage, document=settings.matches_document)
    repository = MatchRepository(store, rules=settings.to_rules())
    repository.load()

    logger.info(
        "scorer ready",
        data_dir=settings.data_dir,
        log_file=str(log_file) if log_file else None,
        matches=len(repository.matches),
    )
    return repository
