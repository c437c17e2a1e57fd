# storefront/services/transaction_runner.py
import logging
from typing import Callable, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_none,
)

from storefront.domain.errors import Conflict, VersionConflict
from storefront.utils.settings import (
    CART_TX_BACKOFF_MAX_SECONDS,
    CART_TX_BACKOFF_SECONDS,
    CART_TX_MAX_ATTEMPTS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

S = TypeVar("S")
U = TypeVar("U")
R = TypeVar("R")


class TransactionRunner:
    """
    Optimistic read -> mutate -> conditional write.

    - read() returns a fresh snapshot, versions included
    - mutate(snapshot) is pure; it returns the new state or raises a DomainError
    - write(snapshot, new_state) raises VersionConflict if the snapshot is stale

    A VersionConflict restarts the whole unit from read(); anything else
    (domain errors included) propagates on the first attempt. When attempts
    run out the caller gets Conflict.
    """

    def __init__(
        self,
        max_attempts: int = CART_TX_MAX_ATTEMPTS,
        backoff: float = CART_TX_BACKOFF_SECONDS,
        max_backoff: float = CART_TX_BACKOFF_MAX_SECONDS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.max_backoff = max_backoff

    def _retrying(self) -> Retrying:
        # 10ms, 20ms, 40ms ... with the default backoff
        wait = (
            wait_exponential(multiplier=self.backoff, max=self.max_backoff)
            if self.backoff > 0
            else wait_none()
        )
        return Retrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait,
            retry=retry_if_exception_type(VersionConflict),
            before_sleep=before_sleep_log(logger, logging.INFO),
        )

    def run(
        self,
        read: Callable[[], S],
        mutate: Callable[[S], U],
        write: Callable[[S, U], R],
    ) -> R:
        def attempt() -> R:
            snapshot = read()
            new_state = mutate(snapshot)
            return write(snapshot, new_state)

        try:
            return self._retrying()(attempt)
        except VersionConflict as exc:
            logger.warning(
                f"Giving up after {self.max_attempts} attempts on {exc.kind}/{exc.doc_id}"
            )
            raise Conflict(
                "The record was modified concurrently, please retry",
                {"kind": exc.kind, "id": exc.doc_id, "attempts": self.max_attempts},
            ) from exc
