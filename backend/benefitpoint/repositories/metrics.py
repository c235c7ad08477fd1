"""Dashboard counters the store does not track yet.

Record assignments, activities and requests have no tables behind them.
The dashboard asks a MetricsProvider for them; the default reports zeros.
"""
from typing import Protocol

from benefitpoint.schemas.dashboard import DueCounts, RequestCounts


class MetricsProvider(Protocol):
    def record_assignments(self, plan_count: int) -> DueCounts: ...

    def activities(self, plan_count: int) -> DueCounts: ...

    def requests(self, plan_count: int) -> RequestCounts: ...


class ZeroMetricsProvider:
    def record_assignments(self, plan_count: int) -> DueCounts:
        return DueCounts()

    def activities(self, plan_count: int) -> DueCounts:
        return DueCounts()

    def requests(self, plan_count: int) -> RequestCounts:
        return RequestCounts()
