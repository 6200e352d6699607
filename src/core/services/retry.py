"""Política de reintentos sobre un `BatchOutcome`.

Separada del I/O: el re-envío se delega a `rerun`, de modo que la política se
prueba sin red. Los resultados reintentados vuelven a su posición original.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence

from core.domain.models import BatchOutcome, CaptureError, CaptureOutcome, CaptureResult

logger = logging.getLogger(__name__)

Rerun = Callable[[list[str]], Awaitable[BatchOutcome]]


def failed_targets(outcomes: Sequence[CaptureOutcome]) -> list[str]:
    """Target URLs of every failed slot, in slot order."""

    return [o.target_url for o in outcomes if isinstance(o, CaptureError)]


def split_outcomes(
    outcomes: Sequence[CaptureOutcome],
) -> tuple[list[CaptureResult], list[CaptureError]]:
    successes = [o for o in outcomes if isinstance(o, CaptureResult)]
    failures = [o for o in outcomes if isinstance(o, CaptureError)]
    return successes, failures


def merge_outcomes(
    outcomes: Sequence[CaptureOutcome],
    retried: Sequence[CaptureOutcome],
) -> BatchOutcome:
    """Overlay `retried` onto the failed slots of `outcomes`.

    `retried[i]` replaces the i-th failed slot. Successful slots are never
    touched, and the length of the result always equals `len(outcomes)`.
    """

    failed_slots = [i for i, o in enumerate(outcomes) if isinstance(o, CaptureError)]
    if len(retried) != len(failed_slots):
        raise ValueError(
            f"Expected {len(failed_slots)} retried outcomes, got {len(retried)}"
        )

    merged: BatchOutcome = list(outcomes)
    for slot, outcome in zip(failed_slots, retried):
        merged[slot] = outcome
    return merged


async def retry_failures(
    outcomes: Sequence[CaptureOutcome],
    retries: int,
    rerun: Rerun,
) -> BatchOutcome:
    """Re-run the failed subset until none fail or the budget is spent."""

    current: BatchOutcome = list(outcomes)
    remaining = max(0, retries)

    while remaining > 0:
        pending = failed_targets(current)
        if not pending:
            break
        remaining -= 1
        logger.info(
            "Retrying %d failed link(s), %d retr%s left after this one",
            len(pending),
            remaining,
            "y" if remaining == 1 else "ies",
        )
        current = merge_outcomes(current, await rerun(pending))

    return current
