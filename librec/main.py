"""Composition root: logging setup and recommender wiring."""

import logging

from librec.adapters.recommender.hybrid import HybridRecommenderAdapter
from librec.adapters.store.memory import InMemoryLibraryStore
from librec.adapters.store.sql import SqlLibraryStore
from librec.config import Settings, StoreBackend, settings
from librec.database import create_engine, create_session_factory
from librec.ports.stores import LibraryStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler if the host has none; always apply ``level`` to librec."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    logging.getLogger("librec").setLevel(level)


def create_store(config: Settings) -> LibraryStore:
    """Build the store adapter selected by ``store_backend``."""
    if config.store_backend == StoreBackend.MEMORY:
        return InMemoryLibraryStore()
    engine = create_engine(config.database_url, echo=config.database_echo)
    return SqlLibraryStore(create_session_factory(engine))


def create_recommender(
    config: Settings | None = None,
    store: LibraryStore | None = None,
) -> HybridRecommenderAdapter:
    """Build a recommender from settings; an explicit ``store`` wins over the backend."""
    config = config or settings
    configure_logging(config.log_level)
    if store is None:
        store = create_store(config)
    logger.info("Store backend: %s", config.store_backend.value)
    logger.info(
        "Default limits: recommend=%d, similar=%d, concurrent scoring=%s",
        config.default_recommendation_limit,
        config.default_similar_limit,
        config.concurrent_scoring,
    )
    return HybridRecommenderAdapter(
        store,
        default_limit=config.default_recommendation_limit,
        default_similar_limit=config.default_similar_limit,
        concurrent_scoring=config.concurrent_scoring,
    )
