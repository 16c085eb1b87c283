"""
Per-play royalty rate policy.

Current policy:
- One global rate per play (PER_PLAY_RATE setting)
- Interface kept pluggable so rates can later vary per work or per license
"""
from __future__ import annotations

from decimal import Decimal
from typing import Protocol
import logging

from prorights.core.config import settings
from prorights.models.usage_report import UsageReport

logger = logging.getLogger(__name__)


class RateProvider(Protocol):
    """Protocol for per-play rate providers."""

    def rate_for(self, report: UsageReport) -> Decimal:
        """Rate per play to apply to a usage report."""
        ...


class FlatRateProvider:
    """Applies the same rate to every usage report."""

    def __init__(self, rate: Decimal | None = None):
        rate = settings.PER_PLAY_RATE if rate is None else Decimal(rate)
        if rate < 0:
            raise ValueError(f"Per-play rate cannot be negative, got {rate}")
        self.rate = rate

    def rate_for(self, report: UsageReport) -> Decimal:
        return self.rate


# Default provider instance
rate_provider = FlatRateProvider()
