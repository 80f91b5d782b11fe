"""集計オーケストレーションサービス"""

from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union
import logging
import time
from pydantic import BaseModel

from ..adapters.upstream_client import UpstreamClient, UpstreamError
from ..domain.capacity_aggregator import CapacityAggregator
from ..domain.detail_aggregator import DetailAggregator
from ..domain.merger import merge_establishments
from ..domain.models import ErrorEnvelope, MergedEstablishment, SlaughterThroughput
from ..domain.normalizer import DataNormalizer


class FailurePolicy(str, Enum):
    """上流リソース取得失敗時の扱い"""
    FATAL = "fatal"
    DEGRADE = "degrade-to-empty"


class ListingResult(BaseModel):
    """
    一覧パイプラインの結果

    Attributes:
        success: 一覧が生成できたか
        establishments: 結合済みレコード（失敗時は空）
        error: 汎用エラーメッセージ（失敗時のみ）
        execution_time_seconds: 実行時間（秒）
    """
    success: bool
    establishments: List[MergedEstablishment] = []
    error: Optional[str] = None
    execution_time_seconds: float = 0.0

    def to_payload(self) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        """
        呼び出し元に返す JSON 互換の値

        Returns:
            成功時は結合済みレコードの配列、失敗時はエラーエンベロープ
        """
        if not self.success:
            return ErrorEnvelope(error=self.error or AggregationService.GENERIC_ERROR_MESSAGE).model_dump()
        return [record.model_dump(mode="json") for record in self.establishments]


class AggregationService:
    """
    一覧・詳細パイプライン全体のオーケストレーション

    Responsibilities:
    - 事業所・能力の 2 リソースを並行取得
    - リソースごとの失敗ポリシー（fatal / degrade-to-empty）の適用
    - 正規化・能力集計・結合の調整
    - 事業所詳細の処理頭数集計（失敗時は全 0）

    呼び出しごとに全件を再計算し、呼び出し間で状態を共有しません。
    """

    GENERIC_ERROR_MESSAGE = "Internal server error"

    # 先頭ページを十分大きなページサイズで取得し、全件取得とみなす
    PAGE_SIZES = {
        UpstreamClient.ESTABLISHMENTS: 9999,
        UpstreamClient.CAPACITIES: 99999,
    }

    def __init__(
        self,
        client: UpstreamClient,
        capacity_aggregator: Optional[CapacityAggregator] = None,
        establishments_policy: FailurePolicy = FailurePolicy.FATAL,
        capacities_policy: FailurePolicy = FailurePolicy.DEGRADE,
    ):
        """
        AggregationService を初期化

        Args:
            client: 上流 API クライアント
            capacity_aggregator: 能力集計（None の場合は既定インスタンス）
            establishments_policy: 事業所リソース取得失敗時のポリシー
            capacities_policy: 能力リソース取得失敗時のポリシー
        """
        self.client = client
        self.capacity_aggregator = capacity_aggregator or CapacityAggregator()
        self.policies = {
            UpstreamClient.ESTABLISHMENTS: FailurePolicy(establishments_policy),
            UpstreamClient.CAPACITIES: FailurePolicy(capacities_policy),
        }
        self.logger = logging.getLogger(__name__)

    def run_listing(self) -> ListingResult:
        """
        一覧パイプラインを実行

        Returns:
            ListingResult: 結合済みレコード、または汎用エラー

        Postconditions: 失敗時に部分的な配列は返さない
        """
        start_time = time.time()

        try:
            establishments_raw, capacities_raw = self._fetch_resources()

            establishments = [DataNormalizer.normalize(item) for item in establishments_raw]
            capacities = self.capacity_aggregator.aggregate(capacities_raw)
            merged = merge_establishments(establishments, capacities)

            execution_time = time.time() - start_time
            self.logger.info(
                "Listing aggregation completed",
                extra={
                    "establishments_count": len(merged),
                    "capacity_records_count": len(capacities_raw),
                    "execution_time_seconds": execution_time
                }
            )
            return ListingResult(
                success=True,
                establishments=merged,
                execution_time_seconds=execution_time
            )

        except UpstreamError as e:
            self.logger.error(
                f"Listing aggregation failed: {str(e)}",
                extra={"url": e.url}
            )
            return ListingResult(
                success=False,
                error=self.GENERIC_ERROR_MESSAGE,
                execution_time_seconds=time.time() - start_time
            )

        except Exception as e:
            self.logger.error(f"Unexpected error in listing aggregation: {str(e)}", exc_info=True)
            return ListingResult(
                success=False,
                error=self.GENERIC_ERROR_MESSAGE,
                execution_time_seconds=time.time() - start_time
            )

    def run_detail(self, establishment_id: Union[int, str]) -> SlaughterThroughput:
        """
        事業所詳細パイプラインを実行

        Args:
            establishment_id: 事業所 ID

        Returns:
            SlaughterThroughput: 畜種別処理頭数（取得失敗時は全フィールド 0）
        """
        try:
            detail = self.client.fetch_establishment_detail(establishment_id)
        except UpstreamError as e:
            self.logger.warning(
                f"Failed to fetch establishment detail: {establishment_id}",
                extra={"error": str(e)}
            )
            return DetailAggregator.empty()

        return DetailAggregator.aggregate(detail)

    def _fetch_resources(self) -> Tuple[List[Any], List[Any]]:
        """
        事業所・能力の 2 リソースを並行取得

        Returns:
            Tuple[List[Any], List[Any]]: (事業所の生レコード, 能力の生レコード)

        Raises:
            UpstreamError: fatal ポリシーのリソースの取得に失敗した場合
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            establishments_future = executor.submit(
                self._fetch_with_policy, UpstreamClient.ESTABLISHMENTS
            )
            capacities_future = executor.submit(
                self._fetch_with_policy, UpstreamClient.CAPACITIES
            )
            return establishments_future.result(), capacities_future.result()

    def _fetch_with_policy(self, resource: str) -> List[Any]:
        """
        リソースを取得し、失敗時はポリシーに従う

        Args:
            resource: リソース名

        Returns:
            List[Any]: 生レコード（degrade ポリシーで失敗した場合は空リスト）

        Raises:
            UpstreamError: fatal ポリシーで取得に失敗した場合
        """
        try:
            return self.client.fetch_collection(resource, 0, self.PAGE_SIZES[resource])
        except UpstreamError as e:
            if self.policies[resource] == FailurePolicy.FATAL:
                raise
            self.logger.warning(
                f"Failed to fetch {resource}, continuing without it",
                extra={"error": str(e)}
            )
            return []
