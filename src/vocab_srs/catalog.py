"""Select the working set of items for a study session."""
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

from vocab_srs.due import is_record_due
from vocab_srs.errors import MissingCategoryError
from vocab_srs.models import Item, ProgressRecord, ReviewMode, SessionConfig

logger = logging.getLogger(__name__)


def get_categories(catalog: Iterable[Item]) -> list[str]:
    """Distinct category labels, sorted. Matches the keys of ``due_count_by_category``."""
    return sorted({item.category for item in catalog})


def get_due_items(
    catalog: Iterable[Item],
    progress: Mapping[int, ProgressRecord],
    now: datetime,
) -> list[Item]:
    return [item for item in catalog if is_record_due(progress.get(item.id), now)]


def filter_catalog(
    catalog: list[Item],
    progress: Mapping[int, ProgressRecord],
    config: SessionConfig,
    now: datetime,
) -> list[Item]:
    """Items to study for ``config``, in catalog order.

    An empty list is a valid result ("all caught up" or an unknown category).
    """
    mode = config.review_mode
    if mode is ReviewMode.ALL:
        return list(catalog)
    if mode is ReviewMode.SMART:
        return get_due_items(catalog, progress, now)
    if mode is ReviewMode.CATEGORY:
        category = config.category_filter
        if category is None or not category.strip():
            raise MissingCategoryError()
        in_category = [item for item in catalog if item.category == category]
        if not in_category:
            logger.debug("No items in category %r", category)
        return get_due_items(in_category, progress, now)
    raise ValueError(f"Unknown review mode: {mode!r}")


def sort_by_priority(item_ids: Iterable[int], progress: Mapping[int, ProgressRecord]) -> list[int]:
    """Order ids most urgent first: new items, then lower level, then least recently practiced."""

    def key(item_id):
        record = progress.get(item_id)
        if record is None:
            return (0, 0, 0.0)
        practiced = record.last_practiced_at.timestamp() if record.last_practiced_at else 0.0
        return (1, record.mastery_level, practiced)

    return sorted(item_ids, key=key)
