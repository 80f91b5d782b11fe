"""
ドメイン層

データ正規化・能力集計・結合・統計ロジックを提供します。
"""

from .models import (
    RawCapacityRecord,
    RawEstablishment,
    RawAnimalThroughput,
    Establishment,
    MergedEstablishment,
    SpeciesCapacities,
    SlaughterThroughput,
    ErrorEnvelope,
)
from .normalizer import DataNormalizer
from .capacity_aggregator import CapacityAggregator
from .merger import merge_establishments
from .detail_aggregator import DetailAggregator
from .listing_query import ListingQuery, ListingPage, filter_establishments, paginate
from .statistics import (
    StateSortOrder,
    StatusSummary,
    StateStatistics,
    StateTotals,
    summarize_status,
    compute_state_statistics,
    compute_state_totals,
)

__all__ = [
    "RawCapacityRecord",
    "RawEstablishment",
    "RawAnimalThroughput",
    "Establishment",
    "MergedEstablishment",
    "SpeciesCapacities",
    "SlaughterThroughput",
    "ErrorEnvelope",
    "DataNormalizer",
    "CapacityAggregator",
    "merge_establishments",
    "DetailAggregator",
    "ListingQuery",
    "ListingPage",
    "filter_establishments",
    "paginate",
    "StateSortOrder",
    "StatusSummary",
    "StateStatistics",
    "StateTotals",
    "summarize_status",
    "compute_state_statistics",
    "compute_state_totals",
]
