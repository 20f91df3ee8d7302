"""Filter evaluation over a Registry."""

from collections.abc import Iterable
from dataclasses import dataclass

from server_scripts.core.models import Registry, ScriptRecord, ScriptType, Status, Tier


@dataclass(frozen=True)
class ScriptFilter:
    """Conjunctive filter; None fields pass everything."""

    category: str | None = None
    status: Status | None = None
    type: ScriptType | None = None
    search: str | None = None
    limit: int = 0
    tiers: frozenset[Tier] | None = None

    def matches(self, record: ScriptRecord) -> bool:
        if self.category is not None and record.category != self.category:
            return False
        if self.status is not None and record.status is not self.status:
            return False
        if self.type is not None and record.type is not self.type:
            return False
        if self.tiers is not None and record.tier not in self.tiers:
            return False
        if self.search and self.search.lower() not in record.name.lower():
            return False
        return True


def iter_matching(
    records: Iterable[ScriptRecord], script_filter: ScriptFilter
) -> Iterable[ScriptRecord]:
    """Yield matching records in the given order, stopping after the filter limit."""
    emitted = 0
    for record in records:
        if script_filter.limit > 0 and emitted >= script_filter.limit:
            return
        if script_filter.matches(record):
            emitted += 1
            yield record


def filter_scripts(registry: Registry, script_filter: ScriptFilter) -> list[ScriptRecord]:
    """Return records matching the filter, sorted lexically by name."""
    return list(iter_matching(registry.records(), script_filter))
