"""
集計統計

結合済みレコードから状態別件数サマリーと州別統計を算出します。
"""

from enum import Enum
from typing import Dict, List
from pydantic import BaseModel, Field

from .models import CapacityValue, MergedEstablishment

STATUS_ACTIVE = "A"
STATUS_PENDING = "P"


class StateSortOrder(str, Enum):
    """州別統計の並び順"""
    TOTAL = "total"
    ALPHABETICAL = "alphabetical"
    BOVINE = "bovine"


class StatusSummary(BaseModel):
    """状態別件数サマリー"""

    total: int = 0
    active: int = 0
    pending: int = 0
    other: int = 0


class StateStatistics(BaseModel):
    """
    州別統計

    Attributes:
        state_code: 州コード
        total: 事業所数
        active / pending / other: 状態別件数
        with_bovine: 牛の能力を持つ事業所数
        bovine_capacity: 牛の日量合計
        bovine_hourly_capacity: 牛の時間量合計
    """
    state_code: str
    total: int = 0
    active: int = 0
    pending: int = 0
    other: int = 0
    with_bovine: int = 0
    bovine_capacity: CapacityValue = 0
    bovine_hourly_capacity: CapacityValue = 0


class StateTotals(BaseModel):
    """
    州別統計の総計

    Attributes:
        state_count: 州数
        establishment_count: 事業所数（牛フィルタ有効時は牛事業所数）
        active_count: 稼働中の事業所数
        with_bovine: 牛の能力を持つ事業所数
        bovine_capacity: 牛の日量合計
    """
    state_count: int = 0
    establishment_count: int = 0
    active_count: int = 0
    with_bovine: int = 0
    bovine_capacity: CapacityValue = 0


def summarize_status(records: List[MergedEstablishment]) -> StatusSummary:
    """
    状態コード別の件数を集計

    Args:
        records: 結合済みレコード

    Returns:
        StatusSummary: 'A' は active、'P' は pending、それ以外は other
    """
    summary = StatusSummary()
    for record in records:
        summary.total += 1
        if record.status_code == STATUS_ACTIVE:
            summary.active += 1
        elif record.status_code == STATUS_PENDING:
            summary.pending += 1
        else:
            summary.other += 1
    return summary


def compute_state_statistics(
    records: List[MergedEstablishment],
    sort_by: StateSortOrder = StateSortOrder.TOTAL,
    search_term: str = "",
    bovine_only: bool = False,
) -> List[StateStatistics]:
    """
    州別統計を算出

    Args:
        records: 結合済みレコード
        sort_by: 並び順（total: 件数降順, alphabetical: 州コード昇順, bovine: 牛事業所数降順）
        search_term: 州コードの部分一致検索（大文字小文字を区別しない）
        bovine_only: 牛事業所を持つ州のみ

    Returns:
        List[StateStatistics]: 同順位は出現順を保つ
    """
    stats: Dict[str, StateStatistics] = {}

    for record in records:
        state = stats.get(record.state_code)
        if state is None:
            state = stats[record.state_code] = StateStatistics(state_code=record.state_code)

        state.total += 1
        if record.status_code == STATUS_ACTIVE:
            state.active += 1
        elif record.status_code == STATUS_PENDING:
            state.pending += 1
        else:
            state.other += 1

        if record.capacities.has_bovine:
            state.with_bovine += 1
            state.bovine_capacity += record.capacities.bovine
            state.bovine_hourly_capacity += record.capacities.bovine_hourly

    result = list(stats.values())

    if search_term:
        term = search_term.lower()
        result = [state for state in result if term in state.state_code.lower()]

    if bovine_only:
        result = [state for state in result if state.with_bovine > 0]

    sort_by = StateSortOrder(sort_by)
    if sort_by == StateSortOrder.ALPHABETICAL:
        result.sort(key=lambda state: state.state_code)
    elif sort_by == StateSortOrder.BOVINE:
        result.sort(key=lambda state: state.with_bovine, reverse=True)
    else:
        result.sort(key=lambda state: state.total, reverse=True)

    return result


def compute_state_totals(states: List[StateStatistics], bovine_only: bool = False) -> StateTotals:
    """
    州別統計の総計を算出

    Args:
        states: 集計対象の州別統計
        bovine_only: True の場合、事業所数として牛事業所数を合計する

    Returns:
        StateTotals: 総計
    """
    totals = StateTotals(state_count=len(states))
    for state in states:
        totals.establishment_count += state.with_bovine if bovine_only else state.total
        totals.active_count += state.active
        totals.with_bovine += state.with_bovine
        totals.bovine_capacity += state.bovine_capacity
    return totals
