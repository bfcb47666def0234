# telecom_cart/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from telecom_cart.domain.errors import ConflictError


def db_retry():
    """Czekanie na baze przy starcie (np. postgres w docker compose jeszcze wstaje)."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(OperationalError),
    )


def conflict_retry():
    """Wyscig przy tworzeniu koszyka - ponowny odczyt zwraca koszyk zwyciezcy."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(ConflictError),
    )
