# region Imports
import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from .config import (
    FRESHNESS_MINUTES, IMMUTABLE_MAX_AGE, ON_PARSE_ERROR,
    STALE_ON_SKEW, STALE_WHILE_REVALIDATE, TIMEZONE,
)
from .models import CachePolicy
from .timestamps import TimeParseError, clock_label, minutes_between, time_label
# endregion

logger = logging.getLogger(__name__)

# region Freshness Window
def freshness_policy(
    dataset_time: str,
    current_time: str,
    window: int = FRESHNESS_MINUTES,
    *,
    stale_on_skew: bool = STALE_ON_SKEW,
    stale_while_revalidate: int = STALE_WHILE_REVALIDATE,
    on_parse_error: str = ON_PARSE_ERROR,
    day_rollover: bool = True,
) -> CachePolicy:
    """
    Cache for whatever is left of the upstream refresh window.

    remaining = window - (current - dataset) minutes. Nothing left means
    revalidate; so does more than a full window left when stale_on_skew is
    set, which only happens when the dataset clock is ahead of ours.
    """
    try:
        elapsed = minutes_between(current_time, dataset_time, day_rollover=day_rollover)
    except TimeParseError as e:
        if on_parse_error == "revalidate":
            logger.warning("Cannot compare %r and %r (%s); forcing revalidation",
                           current_time, dataset_time, e)
            return CachePolicy(must_revalidate=True, stale_while_revalidate=stale_while_revalidate)
        logger.warning("Cannot compare %r and %r (%s); assuming no time elapsed",
                       current_time, dataset_time, e)
        elapsed = 0

    remaining = window - elapsed
    if remaining <= 0 or (stale_on_skew and remaining > window):
        return CachePolicy(max_age_seconds=0, must_revalidate=True,
                           stale_while_revalidate=stale_while_revalidate)
    return CachePolicy(max_age_seconds=remaining * 60)
# endregion

# region Request Policy
def cache_policy(
    dataset_id: str,
    requested_id: Optional[str] = None,
    now: Optional[datetime] = None,
    window: int = FRESHNESS_MINUTES,
    **kwargs,
) -> CachePolicy:
    """Immutable when the caller pinned the (non-empty) dataset id being served, else freshness based."""
    if dataset_id and requested_id == dataset_id:
        return CachePolicy(max_age_seconds=IMMUTABLE_MAX_AGE, immutable=True)

    tz = ZoneInfo(TIMEZONE)
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is not None:
        now = now.astimezone(tz)
    return freshness_policy(time_label(dataset_id), clock_label(now), window, **kwargs)
# endregion
