"""
結合ロジック

正規化済み事業所と集計済み能力を事業所 ID で左外部結合し、
固定フィールドの能力オブジェクトを持つ最終レコードを生成します。
"""

from typing import Dict, List, Mapping, Optional

from .capacity_aggregator import BOVINE_SPECIES, BOVINE_HOURLY_KEY, CapacityMap
from .models import CapacityValue, Establishment, MergedEstablishment, SpeciesCapacities
from .normalizer import DataNormalizer

# 出力フィールド → 上流の畜種キー
SPECIES_FIELDS = {
    "bovine": BOVINE_SPECIES,
    "bovine_hourly": BOVINE_HOURLY_KEY,
    "swine": "Suíno",
    "goat": "Caprino",
    "sheep": "Ovino",
    "buffalo": "Bubalino",
}

KNOWN_SPECIES_KEYS = frozenset(SPECIES_FIELDS.values())


def build_capacities(by_species: Mapping[str, CapacityValue]) -> SpeciesCapacities:
    """
    畜種キー → 合計能力 の対応表から固定フィールドの能力オブジェクトを生成

    Args:
        by_species: 1 事業所分の集計結果

    Returns:
        SpeciesCapacities: 許可リスト外の畜種は other に合算
    """
    values = {field: by_species.get(key, 0) for field, key in SPECIES_FIELDS.items()}
    values["other"] = sum(
        amount for key, amount in by_species.items() if key not in KNOWN_SPECIES_KEYS
    )
    return SpeciesCapacities(**values)


def merge_establishments(
    establishments: List[Establishment],
    capacities: Optional[CapacityMap] = None,
) -> List[MergedEstablishment]:
    """
    事業所と能力を左外部結合

    Args:
        establishments: 正規化済み事業所（出力順はこの順序に従う）
        capacities: CapacityAggregator の出力（None は空として扱う）

    Returns:
        List[MergedEstablishment]: 入力と同数・同順のレコード

    Note:
        - 能力データのない事業所も能力 0 で出力する
        - 事業所側に存在しない ID の能力データは出力しない
        - 並べ替え・重複排除は行わない
    """
    capacities = capacities or {}
    empty: Dict[str, CapacityValue] = {}

    merged = []
    for establishment in establishments:
        key = DataNormalizer.identifier_key(establishment.id)
        by_species = capacities.get(key, empty) if key is not None else empty
        merged.append(
            MergedEstablishment(
                **establishment.model_dump(),
                capacities=build_capacities(by_species),
            )
        )
    return merged
