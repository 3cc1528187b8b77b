"""Domain layer for arrecon application.

The ledger services (ledger, ledger_import) depend on the database layer
and are imported from their own modules.
"""

from arrecon.domain.allocation import AllocationService
from arrecon.domain.aging import AgingService
from arrecon.domain.metrics import PeriodMetricsService
from arrecon.domain.rollups import CollectionRollupService

__all__ = [
    "AllocationService",
    "AgingService",
    "PeriodMetricsService",
    "CollectionRollupService",
]
