"""
データモデル定義

このモジュールは sisbi-aggregator のドメイン層のデータモデルを定義します:
- RawCapacityRecord / RawEstablishment / RawAnimalThroughput:
  上流 API のレコードから抽出した正規化前の中間表現（全フィールド任意）
- Establishment / MergedEstablishment: 画面・エクスポート向けに正規化された事業所データ
- SpeciesCapacities / SlaughterThroughput: 畜種別の能力値
"""

import math
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

# 既定値（欠損文字列フィールドの番兵値）
NOT_AVAILABLE = "N/A"

Identifier = Union[int, str]

# 整数の合計は int のまま保持する（JSON で 10.0 ではなく 10）
CapacityValue = Union[int, float]


class RawCapacityRecord(BaseModel):
    """
    上流の生産能力レコード 1 件の中間表現

    結合キー（establishment_id, species_name）が欠損しているレコードは
    集計時に除外されます。
    """

    establishment_id: Optional[Identifier] = Field(default=None, description="事業所 ID")
    species_name: Optional[str] = Field(default=None, description="畜種名 (例: 'Bovino', 'Suíno')")
    capacity_value: CapacityValue = Field(default=0, description="能力値")
    capacity_unit: Optional[str] = Field(default=None, description="単位 (例: 'Animal/dia')")

    @field_validator("capacity_value")
    @classmethod
    def validate_capacity_value(cls, v: CapacityValue) -> CapacityValue:
        """
        能力値の非負チェック

        負値・NaN・無限大は 0 に丸めます（例外はスローしない）。
        """
        if isinstance(v, float) and (math.isnan(v) or math.isinf(v)):
            return 0
        if v < 0:
            return 0
        return v


class RawEstablishment(BaseModel):
    """上流の事業所レコード 1 件の中間表現"""

    id: Optional[Identifier] = Field(default=None, description="事業所 ID (idEstabSisbi)")
    name: Optional[str] = Field(default=None, description="事業所名 (nome)")
    state_code: Optional[str] = Field(default=None, description="州コード (sgUf)")
    municipality_name: Optional[str] = Field(default=None, description="市町村名 (nmMunicipio)")
    status_code: Optional[str] = Field(default=None, description="状態コード (csSituacaoEstabelecimento)")
    tax_id: Optional[str] = Field(default=None, description="法人番号 CNPJ (pessoa.pessoaJuridica.nrCnpj)")


class RawAnimalThroughput(BaseModel):
    """事業所詳細の animais 配列要素 1 件の中間表現"""

    species: str = Field(default="", description="畜種名（小文字化前）")
    slaughter_per_day: int = Field(default=0, ge=0, description="1 日あたり処理頭数")
    slaughter_per_hour: int = Field(default=0, ge=0, description="1 時間あたり処理頭数")


class Establishment(BaseModel):
    """
    正規化済み事業所データ

    全フィールドに既定値を持ち、上流の欠損は "N/A" で表現されます。
    """

    id: Optional[Identifier] = Field(default=None, description="事業所 ID")
    name: str = Field(default=NOT_AVAILABLE, description="事業所名（前後空白除去済み）")
    state_code: str = Field(default=NOT_AVAILABLE, description="州コード")
    municipality_name: str = Field(default=NOT_AVAILABLE, description="市町村名")
    status_code: str = Field(default=NOT_AVAILABLE, description="状態コード ('A', 'P', その他)")
    tax_id: str = Field(default=NOT_AVAILABLE, description="法人番号 (CNPJ)")


class SpeciesCapacities(BaseModel):
    """
    畜種別の生産能力（一覧パイプライン出力）

    bovine_hourly 以外はすべて 1 日あたりの頭数です。
    """

    bovine: CapacityValue = Field(default=0, description="牛 (Bovino) 日量")
    bovine_hourly: CapacityValue = Field(default=0, description="牛 (Bovino) 時間量")
    swine: CapacityValue = Field(default=0, description="豚 (Suíno) 日量")
    goat: CapacityValue = Field(default=0, description="山羊 (Caprino) 日量")
    sheep: CapacityValue = Field(default=0, description="羊 (Ovino) 日量")
    buffalo: CapacityValue = Field(default=0, description="水牛 (Bubalino) 日量")
    other: CapacityValue = Field(default=0, description="上記以外の畜種の日量合計")

    @field_validator("*")
    @classmethod
    def validate_non_negative(cls, v: CapacityValue) -> CapacityValue:
        """
        能力値の負値チェックバリデーション

        Raises:
            ValueError: 負の値が渡された場合
        """
        if v < 0:
            raise ValueError(f"能力値は負の値にできません: {v}")
        return v

    @property
    def has_bovine(self) -> bool:
        """牛の日量または時間量を持つか"""
        return self.bovine > 0 or self.bovine_hourly > 0


class MergedEstablishment(Establishment):
    """
    事業所と集計済み能力を結合した最終レコード

    一覧パイプラインの出力スキーマとして機能します。
    """

    capacities: SpeciesCapacities = Field(
        default_factory=SpeciesCapacities, description="畜種別能力"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1234,
                "name": "Frigorífico Exemplo Ltda",
                "state_code": "GO",
                "municipality_name": "Goiânia",
                "status_code": "A",
                "tax_id": "12345678000190",
                "capacities": {
                    "bovine": 500,
                    "bovine_hourly": 60,
                    "swine": 0,
                    "goat": 0,
                    "sheep": 0,
                    "buffalo": 0,
                    "other": 0
                }
            }
        }
    )


class SlaughterThroughput(BaseModel):
    """
    事業所詳細から集計した畜種別処理頭数（詳細パイプライン出力）

    取得失敗時も全フィールド 0 で返されます。
    """

    bovine: int = Field(default=0, ge=0, description="牛 日量")
    bovine_hourly: int = Field(default=0, ge=0, description="牛 時間量")
    swine: int = Field(default=0, ge=0, description="豚 日量")
    goat: int = Field(default=0, ge=0, description="山羊 日量")
    sheep: int = Field(default=0, ge=0, description="羊 日量")
    buffalo: int = Field(default=0, ge=0, description="水牛 日量")
    other: int = Field(default=0, ge=0, description="その他 日量")


class ErrorEnvelope(BaseModel):
    """呼び出し元に返す汎用エラー"""

    error: str = Field(..., description="汎用エラーメッセージ")
