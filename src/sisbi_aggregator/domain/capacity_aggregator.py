"""
生産能力集計ロジック

生産能力レコードを 事業所 ID → 畜種キー → 合計能力 の対応表に集計します。
一覧パイプラインの能力集計はすべてこのモジュールを経由します。
"""

import logging
from typing import Any, Dict, Iterable, Union

from .models import CapacityValue, RawCapacityRecord
from .normalizer import DataNormalizer

# 時間量を記録する唯一の畜種
BOVINE_SPECIES = "Bovino"
HOURLY_SUFFIX = "_hourly"
BOVINE_HOURLY_KEY = f"{BOVINE_SPECIES}{HOURLY_SUFFIX}"

# 上流の単位ラベル（ポルトガル語表記と英語表記の両方を受け付ける）
DAY_UNITS = frozenset({"Animal/dia", "Animal/day"})
HOUR_UNITS = frozenset({"Animal/hora", "Animal/hour"})

CapacityMap = Dict[str, Dict[str, CapacityValue]]


class CapacityAggregator:
    """
    生産能力集計

    単位が日量のレコードは畜種名ごとに合計し、
    時間量は畜種 "Bovino" のみ "Bovino_hourly" に合計します。
    それ以外の組み合わせは破棄します（エラーではない）。
    """

    def __init__(self):
        """CapacityAggregator を初期化"""
        self.logger = logging.getLogger(__name__)

    def aggregate(
        self, records: Iterable[Union[RawCapacityRecord, Dict[str, Any]]]
    ) -> CapacityMap:
        """
        生産能力レコードを事業所・畜種ごとに集計

        Args:
            records: 上流の生レコード、または RawCapacityRecord のリスト

        Returns:
            CapacityMap: 事業所 ID（文字列）→ 畜種キー → 合計能力

        Note:
            - 事業所 ID または畜種名が欠損したレコードは丸ごと除外
            - 入力は変更しない（同一入力に対して同一結果）
        """
        result: CapacityMap = {}
        dropped = 0
        discarded = 0

        for item in records:
            record = (
                item
                if isinstance(item, RawCapacityRecord)
                else DataNormalizer.parse_capacity_record(item)
            )

            establishment_key = DataNormalizer.identifier_key(record.establishment_id)
            species = record.species_name
            if establishment_key is None or not species:
                dropped += 1
                self.logger.debug(
                    "Capacity record dropped: missing join key",
                    extra={
                        "establishment_id": record.establishment_id,
                        "species_name": species,
                    }
                )
                continue

            by_species = result.setdefault(establishment_key, {})

            bucket = self._bucket_for(species, record.capacity_unit)
            if bucket is None:
                discarded += 1
                continue

            by_species[bucket] = by_species.get(bucket, 0) + record.capacity_value

        if dropped:
            self.logger.info(
                f"Dropped {dropped} capacity records without establishment id or species"
            )
        if discarded:
            self.logger.debug(f"Discarded {discarded} capacity records with unmodeled unit")

        return result

    @staticmethod
    def _bucket_for(species: str, unit: Any) -> Union[str, None]:
        """
        単位と畜種から集計先キーを決定

        Args:
            species: 畜種名
            unit: 単位ラベル

        Returns:
            Union[str, None]: 集計先キー、対象外の場合は None
        """
        if unit in DAY_UNITS:
            return species
        if unit in HOUR_UNITS and species == BOVINE_SPECIES:
            return BOVINE_HOURLY_KEY
        return None
