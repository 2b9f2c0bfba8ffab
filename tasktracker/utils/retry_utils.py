import logging

from tasktracker.exceptions.common_exceptions import ConcurrencyConflictException

logger = logging.getLogger(__name__)


def retry_on_conflict(func, max_attempts=2, *args, **kwargs):
    """
    Re-run ``func`` when it loses an optimistic-concurrency race.

    ``func`` must re-read the document it writes, so each attempt evaluates
    against fresh state. The last conflict propagates to the caller.
    """
    last_exc = None
    for attempt in range(max_attempts):
        try:
            return func(*args, **kwargs)
        except ConcurrencyConflictException as exc:
            last_exc = exc
            logger.warning(f"[RETRY] Attempt {attempt + 1}/{max_attempts} lost a write race: {exc}")
    raise last_exc
