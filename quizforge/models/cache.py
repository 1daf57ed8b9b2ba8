"""Cache accounting models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, computed_field


def _rate(hits: int, misses: int) -> float:
    total = hits + misses
    return hits / total if total else 0.0


class CacheStatistics(BaseModel):
    """Snapshot of the coordinator's hit/miss counters for one reporting window.

    ``total_misses`` counts lookups that no tier answered, so ``hit_rate`` is
    the fraction of ``get`` calls served from cache.  Per-tier rates only
    consider lookups that actually reached that tier.
    """

    model_config = ConfigDict(frozen=True)

    tier1_hits: int = 0
    tier1_misses: int = 0
    tier2_hits: int = 0
    tier2_misses: int = 0
    tier1_writes: int = 0
    tier2_writes: int = 0
    total_misses: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hits(self) -> int:
        return self.tier1_hits + self.tier2_hits

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hit_rate(self) -> float:
        return _rate(self.hits, self.total_misses)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tier1_hit_rate(self) -> float:
        return _rate(self.tier1_hits, self.tier1_misses)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tier2_hit_rate(self) -> float:
        return _rate(self.tier2_hits, self.tier2_misses)
