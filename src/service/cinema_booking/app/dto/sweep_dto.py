from enum import StrEnum
from typing import List
from uuid import UUID

import attrs


class ExpiryOutcome(StrEnum):
    EXPIRED = 'expired'
    # Another transition won the race (e.g. payment confirmed a moment earlier)
    SKIPPED = 'skipped'
    # Not overdue any more from the coordinator's point of view
    NOT_DUE = 'not_due'


@attrs.define
class SweepResult:
    expired: List[UUID] = attrs.field(factory=list)
    skipped: List[UUID] = attrs.field(factory=list)
    failed: List[UUID] = attrs.field(factory=list)

    @property
    def scanned(self) -> int:
        return len(self.expired) + len(self.skipped) + len(self.failed)
