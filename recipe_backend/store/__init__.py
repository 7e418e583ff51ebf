"""
Persistence layer.

Responsibilities:
- Hold users, recipes and reviews as camelCase documents.
- Answer the hard-filter candidate query used by the recommendation engine.
- Compute batched per-recipe rating aggregates.
- Guarantee one review per (user, recipe) through an atomic upsert.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .models import CandidateQuery, DuplicateError, RatingStats

logger = logging.getLogger(__name__)

__all__ = [
    "CandidateQuery",
    "DuplicateError",
    "RatingStats",
    "Store",
    "get_store",
    "reset_store",
]


@dataclass
class Store:
    users: Any
    recipes: Any
    reviews: Any


_store: Store | None = None


def _build(config: StoreConfig) -> Store:
    if config.backend == "mongo":
        from .mongo import connect

        logger.info("Using MongoDB store at %s/%s", config.mongodb_uri, config.mongodb_db)
        return connect(config)
    if config.backend != "memory":
        raise ValueError(f"Unknown store backend: {config.backend!r}")

    from .memory import MemoryStore

    memory = MemoryStore()
    return Store(users=memory.users, recipes=memory.recipes, reviews=memory.reviews)


def get_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> Store:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = _build(config)
    return _store


def reset_store() -> None:
    """Drop the current store so the next ``get_store`` builds a fresh one."""
    global _store
    _store = None
