"""
事業所詳細の処理頭数集計

事業所詳細レスポンスの animais 配列を、固定の畜種分類
（牛・豚・山羊・羊・水牛・その他）に振り分けて合計します。
"""

from typing import Any, Dict, Optional

from .models import SlaughterThroughput
from .normalizer import DataNormalizer


class DetailAggregator:
    """
    事業所詳細の処理頭数集計クラス

    畜種名は小文字化したうえで別名表と完全一致で照合します。
    時間量は牛のみ集計し、その他の畜種の時間量は破棄します。
    """

    # 別名 → 出力フィールド
    _SPECIES_ALIASES = {
        "bovino": "bovine",
        "bovinos": "bovine",
        "suino": "swine",
        "suinos": "swine",
        "suíno": "swine",
        "suínos": "swine",
        "su√≠nos": "swine",  # 上流で文字化けした表記
        "caprino": "goat",
        "caprinos": "goat",
        "ovino": "sheep",
        "ovinos": "sheep",
        "bubalino": "buffalo",
        "bubalinos": "buffalo",
    }

    @staticmethod
    def aggregate(detail: Optional[Dict[str, Any]]) -> SlaughterThroughput:
        """
        事業所詳細から畜種別処理頭数を集計

        Args:
            detail: 事業所詳細の生 JSON オブジェクト

        Returns:
            SlaughterThroughput: 畜種別合計（animais が欠損・配列以外なら全て 0）
        """
        totals = SlaughterThroughput().model_dump()

        animals = detail.get("animais") if isinstance(detail, dict) else None
        if not isinstance(animals, list):
            return SlaughterThroughput(**totals)

        for item in animals:
            if not isinstance(item, dict):
                continue
            animal = DataNormalizer.parse_animal_record(item)
            field = DetailAggregator.classify_species(animal.species)

            totals[field] += animal.slaughter_per_day
            if field == "bovine":
                totals["bovine_hourly"] += animal.slaughter_per_hour

        return SlaughterThroughput(**totals)

    @staticmethod
    def classify_species(species: str) -> str:
        """
        畜種名を出力フィールド名に分類

        Args:
            species: 畜種名（大文字小文字は問わない）

        Returns:
            str: 'bovine', 'swine', 'goat', 'sheep', 'buffalo', 'other' のいずれか
        """
        return DetailAggregator._SPECIES_ALIASES.get(species.lower(), "other")

    @staticmethod
    def empty() -> SlaughterThroughput:
        """取得失敗時に返す全フィールド 0 の結果"""
        return SlaughterThroughput()
