"""
データ正規化ロジック

上流 API の型付けされていない JSON レコードを中間表現（Raw*）に変換し、
事業所レコードを既定値付きの統一スキーマ (Establishment) に正規化します。
全メソッドは全域関数で、上流の欠損・不正値に対して例外をスローしません。
"""

import math
import re
from typing import Any, Optional, Union

from .models import (
    NOT_AVAILABLE,
    Identifier,
    RawCapacityRecord,
    RawEstablishment,
    RawAnimalThroughput,
    Establishment,
)


class DataNormalizer:
    """
    データ正規化クラス

    上流の入れ子構造から必要なフィールドを取り出し、
    欠損値を既定値に置き換える静的メソッドを提供します。
    """

    # 上流の入れ子パス定義
    _CAPACITY_ESTABLISHMENT_ID_PATH = ("estabSisbiClassificacao", "estabelecimentoSisbi", "idEstabSisbi")
    _CAPACITY_SPECIES_PATH = ("categEstabEspecie", "especie", "nmEspecie")
    _CAPACITY_VALUE_PATH = ("qtCapacidade",)
    _CAPACITY_UNIT_PATH = ("tipoCapacProducao", "nmTipoCapacProducao")
    _TAX_ID_PATH = ("pessoa", "pessoaJuridica", "nrCnpj")

    # parseInt 相当: 先頭の整数部分のみ
    _LEADING_INT_PATTERN = re.compile(r'^\s*([+-]?\d+)')

    @staticmethod
    def parse_capacity_record(item: Any) -> RawCapacityRecord:
        """
        生産能力の生レコードを中間表現に変換

        Args:
            item: 上流 estabs-capacidades の配列要素

        Returns:
            RawCapacityRecord: 中間表現（欠損フィールドは None / 0）
        """
        return RawCapacityRecord(
            establishment_id=DataNormalizer._coerce_identifier(
                DataNormalizer._dig(item, DataNormalizer._CAPACITY_ESTABLISHMENT_ID_PATH)
            ),
            species_name=DataNormalizer._coerce_species_name(
                DataNormalizer._dig(item, DataNormalizer._CAPACITY_SPECIES_PATH)
            ),
            capacity_value=DataNormalizer._to_capacity_value(
                DataNormalizer._dig(item, DataNormalizer._CAPACITY_VALUE_PATH)
            ),
            capacity_unit=DataNormalizer._coerce_text(
                DataNormalizer._dig(item, DataNormalizer._CAPACITY_UNIT_PATH)
            ),
        )

    @staticmethod
    def parse_establishment(item: Any) -> RawEstablishment:
        """
        事業所の生レコードを中間表現に変換

        Args:
            item: 上流 estabelecimentos-sisbi の配列要素

        Returns:
            RawEstablishment: 中間表現
        """
        return RawEstablishment(
            id=DataNormalizer._coerce_identifier(DataNormalizer._dig(item, ("idEstabSisbi",))),
            name=DataNormalizer._coerce_text(DataNormalizer._dig(item, ("nome",))),
            state_code=DataNormalizer._coerce_text(DataNormalizer._dig(item, ("sgUf",))),
            municipality_name=DataNormalizer._coerce_text(DataNormalizer._dig(item, ("nmMunicipio",))),
            status_code=DataNormalizer._coerce_text(
                DataNormalizer._dig(item, ("csSituacaoEstabelecimento",))
            ),
            tax_id=DataNormalizer._coerce_text(DataNormalizer._dig(item, DataNormalizer._TAX_ID_PATH)),
        )

    @staticmethod
    def parse_animal_record(item: Any) -> RawAnimalThroughput:
        """
        事業所詳細の animais 要素を中間表現に変換

        Args:
            item: animais 配列の要素

        Returns:
            RawAnimalThroughput: 中間表現（処理頭数は parseInt 相当で整数化）
        """
        species = DataNormalizer._dig(item, ("especie",))
        return RawAnimalThroughput(
            species=species if isinstance(species, str) else "",
            slaughter_per_day=DataNormalizer._to_int(
                DataNormalizer._dig(item, ("capacidadeAbateDia",))
            ),
            slaughter_per_hour=DataNormalizer._to_int(
                DataNormalizer._dig(item, ("capacidadeAbateHora",))
            ),
        )

    @staticmethod
    def normalize_establishment(raw: RawEstablishment) -> Establishment:
        """
        事業所の中間表現を統一スキーマに正規化

        Args:
            raw: 事業所の中間表現

        Returns:
            Establishment: 正規化済みデータ（欠損は "N/A"）
        """
        name = raw.name.strip() if raw.name else ""
        return Establishment(
            id=raw.id,
            name=name or NOT_AVAILABLE,
            state_code=raw.state_code or NOT_AVAILABLE,
            municipality_name=raw.municipality_name or NOT_AVAILABLE,
            status_code=raw.status_code or NOT_AVAILABLE,
            tax_id=raw.tax_id or NOT_AVAILABLE,
        )

    @staticmethod
    def normalize(item: Any) -> Establishment:
        """
        事業所の生レコードを直接統一スキーマに正規化

        Args:
            item: 上流 estabelecimentos-sisbi の配列要素

        Returns:
            Establishment: 正規化済みデータ
        """
        return DataNormalizer.normalize_establishment(DataNormalizer.parse_establishment(item))

    @staticmethod
    def identifier_key(value: Optional[Identifier]) -> Optional[str]:
        """
        結合用の ID キー（1 と "1" を同一視する）

        Args:
            value: 事業所 ID

        Returns:
            Optional[str]: 文字列化した ID、欠損時は None
        """
        if value is None:
            return None
        return str(value)

    @staticmethod
    def _dig(item: Any, path: tuple) -> Any:
        """
        入れ子の辞書をパスに沿って辿る

        途中の要素が辞書でない場合は None を返します。
        """
        current = item
        for key in path:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        return current

    @staticmethod
    def _coerce_identifier(value: Any) -> Optional[Identifier]:
        """
        ID を int または str に変換

        None・真偽値・空文字列は欠損とみなします。
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return None
            return int(value) if value.is_integer() else str(value)
        text = str(value).strip()
        return text or None

    @staticmethod
    def _coerce_species_name(value: Any) -> Optional[str]:
        """畜種名は完全一致で扱うため、空白除去や大文字小文字変換は行わない"""
        if isinstance(value, str) and value:
            return value
        return None

    @staticmethod
    def _coerce_text(value: Any) -> Optional[str]:
        """文字列以外の値は欠損とみなす（数値は文字列化）"""
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None

    @staticmethod
    def _to_capacity_value(value: Any) -> Union[int, float]:
        """
        能力値を非負の数値に変換

        対応形式:
        - int → そのまま（整数のまま保持）
        - float → 整数値なら int、それ以外はそのまま
        - 数値文字列 ("12", "12.5") → 数値
        - 欠損・真偽値・非数値・負値・NaN・float に収まらない巨大値 → 0

        Args:
            value: 上流の qtCapacidade

        Returns:
            Union[int, float]: 非負の能力値
        """
        if value is None or isinstance(value, bool):
            return 0
        if isinstance(value, (int, float)):
            number = value
        elif isinstance(value, str):
            text = value.strip()
            try:
                number = int(text)
            except ValueError:
                try:
                    number = float(text)
                except ValueError:
                    return 0
        else:
            return 0

        try:
            as_float = float(number)
        except OverflowError:
            return 0

        if math.isnan(as_float) or math.isinf(as_float) or as_float < 0:
            return 0
        if isinstance(number, float) and number.is_integer():
            return int(number)
        return number

    @staticmethod
    def _to_int(value: Any) -> int:
        """
        処理頭数を非負の整数に変換（parseInt 相当）

        対応形式:
        - "12" → 12
        - "12abc" → 12
        - 3.9 → 3
        - "abc", None → 0
        - 負値 → 0

        Args:
            value: 上流の capacidadeAbateDia / capacidadeAbateHora

        Returns:
            int: 非負の整数
        """
        if value is None or isinstance(value, bool):
            return 0
        if isinstance(value, int):
            number = value
        elif isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return 0
            number = int(value)
        else:
            match = DataNormalizer._LEADING_INT_PATTERN.match(str(value))
            if not match:
                return 0
            number = int(match.group(1))

        return number if number > 0 else 0
