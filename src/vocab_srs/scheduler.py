"""Session composition: what to study next and how to frame it."""
import logging
import math
from collections.abc import Mapping
from datetime import datetime

from vocab_srs.catalog import filter_catalog
from vocab_srs.config import SECONDS_PER_ITEM
from vocab_srs.models import Item, ProgressRecord, SessionConfig, SessionPlan
from vocab_srs.stats import due_count

logger = logging.getLogger(__name__)


def estimate_minutes(item_count: int) -> int:
    return math.ceil(item_count * SECONDS_PER_ITEM / 60)


def build_session(
    catalog: list[Item],
    progress: Mapping[int, ProgressRecord],
    config: SessionConfig,
    now: datetime,
) -> SessionPlan:
    """Build the working set for one session start.

    The plan lists item ids in catalog order; shuffling is left to the host.
    ``is_empty`` distinguishes "nothing to study" from an error, which is
    always raised instead.
    """
    items = filter_catalog(catalog, progress, config, now)
    plan = SessionPlan(
        items=[item.id for item in items],
        is_empty=not items,
        review_mode=config.review_mode,
        direction=config.direction,
        estimated_minutes=estimate_minutes(len(items)),
        due_count=due_count(catalog, progress, now),
        category_filter=config.category_filter,
    )
    logger.debug(
        "Built %s session: %d items, %d due overall",
        plan.review_mode.value, len(plan.items), plan.due_count,
    )
    return plan
