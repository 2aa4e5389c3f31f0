# shopping/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from shopping.utils.settings import CHECKOUT_MAX_ATTEMPTS
from shopping.utils.logging import get_logger

logger = get_logger(__name__)


def _log_retry(retry_state) -> None:
    logger.warning(
        "Transient database error, retrying unit of work",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()),
    )


def db_retry(attempts: int | None = None):
    """
    Powtarza cala jednostke pracy przy bledach przejsciowych bazy
    (deadlock, lock timeout, zerwane polaczenie).
    Bledy domenowe nie sa powtarzane.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or CHECKOUT_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception_type(OperationalError),
        before_sleep=_log_retry,
    )
