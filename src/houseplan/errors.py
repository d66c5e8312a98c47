# src/houseplan/errors.py
from __future__ import annotations

from typing import Optional

from houseplan.models import FailureReason


class GenerationFailure(Exception):
    """Raised when a layout cannot be produced.

    ``reason`` tells validation problems (fatal, never retried) apart from
    placement dead ends. When retries run out, ``attempt_reasons`` holds the
    reason each attempt was abandoned, in order.
    """

    def __init__(
        self,
        reason: FailureReason,
        message: str,
        attempt_reasons: Optional[list[FailureReason]] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.attempt_reasons = list(attempt_reasons or [])

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.args[0]}"
