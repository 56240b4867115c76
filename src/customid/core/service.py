"""Issue identifiers on item creation and check manual overrides.

The engine itself never retries and does not guarantee uniqueness. This
module is the caller-side loop: draw a fresh counter value, generate, and
try again while the storage layer reports the identifier as taken.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from customid.core.counter import SequenceCounter
from customid.core.models import IdFormat
from customid.core.random_source import RandomSource

logger = logging.getLogger(__name__)


class CustomIdError(RuntimeError):
    """Base class for errors raised above the engine."""


class IdentifierCollisionError(CustomIdError):
    """Every generation attempt produced an identifier already in use."""


class InvalidIdentifierError(CustomIdError):
    """A manually supplied identifier does not conform to the format."""


class IdentifierIssuer:
    """Generates identifiers for newly created items."""

    def __init__(
        self,
        counter: SequenceCounter,
        *,
        max_attempts: int = 5,
        random_source: RandomSource | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._counter = counter
        self._max_attempts = max_attempts
        self._random_source = random_source
        self._clock = clock

    def issue(
        self,
        key: str,
        fmt: IdFormat,
        is_taken: Callable[[str], bool] = lambda _: False,
    ) -> str:
        """Generate an identifier for the owner *key* using *fmt*.

        Each attempt consumes a fresh counter value, so a retry also changes
        the SEQUENCE part, and draws fresh randomness for random elements.

        Raises:
            IdentifierCollisionError: If all attempts collide.
        """
        for attempt in range(1, self._max_attempts + 1):
            counter_value = self._counter.next_value(key)
            candidate = fmt.generate(
                counter_value,
                random_source=self._random_source,
                now=self._clock() if self._clock else None,
            )
            if not is_taken(candidate):
                logger.info("Issued identifier %s for %s", candidate, key)
                return candidate
            logger.warning(
                "Identifier %s already taken for %s (attempt %d/%d)",
                candidate,
                key,
                attempt,
                self._max_attempts,
            )
        raise IdentifierCollisionError(
            f"Could not issue a unique identifier for {key!r} "
            f"after {self._max_attempts} attempts"
        )


def check_override(candidate: str, fmt: IdFormat) -> None:
    """Reject a manual identifier that *fmt* could not have generated.

    Raises:
        InvalidIdentifierError: If *candidate* does not match *fmt*.
    """
    if not fmt.validate_id(candidate):
        raise InvalidIdentifierError(
            f"Identifier {candidate!r} does not match the configured format"
        )
