from __future__ import annotations

import logging
from typing import Sequence

from domain.defaults import DEFAULT_CATEGORIES
from domain.models import CategoryTemplate
from domain.schemas import SeedResult
from infrastructure.ledger_store.store import LedgerStore

logger = logging.getLogger(__name__)


def seed_default_categories(
    store: LedgerStore,
    owner_id: str,
    templates: Sequence[CategoryTemplate] = DEFAULT_CATEGORIES,
) -> SeedResult:
    """Give an owner the default category set, unless they already have any category."""
    existing = store.count_categories(owner_id)
    if existing > 0:
        logger.info("Seeding skipped owner_id=%s existing=%d", owner_id, existing)
        return SeedResult(created=False, message="User already has categories")

    created = store.bulk_insert_categories(owner_id, templates)
    logger.info("Seeding complete owner_id=%s created=%d", owner_id, len(created))
    return SeedResult(created=True, message="Default categories created successfully")
