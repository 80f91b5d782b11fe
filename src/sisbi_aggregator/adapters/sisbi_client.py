"""
SISBI API クライアント

農業省 SISBI レジストリ API から事業所・生産能力データを取得するクライアントです。
"""

from typing import Any, Dict, List, Optional, Union

import requests

from .upstream_client import UpstreamClient, TransportError, DecodeError


class SisbiClient(UpstreamClient):
    """
    SISBI API 向け requests 実装

    リトライおよびレスポンスキャッシュは行いません。
    """

    BASE_URL = "https://sistemasweb.agricultura.gov.br/sisbi_api"

    # 論理リソース名 → API パス
    RESOURCE_PATHS = {
        UpstreamClient.ESTABLISHMENTS: "estabelecimentos-sisbi",
        UpstreamClient.CAPACITIES: "estabs-capacidades",
    }

    HEADERS = {
        "Accept": "application/json",
        "User-Agent": "SISBI-Dashboard/1.0",
    }

    # リクエストタイムアウト（秒）
    TIMEOUT = 30

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Args:
            base_url: API ベース URL（None の場合は BASE_URL）
            timeout: タイムアウト秒数（None の場合は TIMEOUT）
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else self.TIMEOUT

    def fetch_collection(
        self, resource: str, page: int, page_size: int
    ) -> List[Dict[str, Any]]:
        """
        一覧リソースの 1 ページを取得

        Args:
            resource: リソース名（"establishments" または "capacities"）
            page: ページ番号（0 始まり）
            page_size: 1 ページあたりの件数（API の count パラメータ）

        Returns:
            List[Dict[str, Any]]: 生レコードの配列

        Raises:
            ValueError: 未知のリソース名が指定された場合
            TransportError: HTTP エラー・接続エラー発生時
            DecodeError: JSON デコード失敗時、または配列以外が返された場合
        """
        if resource not in self.RESOURCE_PATHS:
            raise ValueError(f"未知のリソース: {resource}")

        url = f"{self.base_url}/{self.RESOURCE_PATHS[resource]}"
        payload = self._get_json(url, params={"page": page, "count": page_size})

        if not isinstance(payload, list):
            raise DecodeError(
                f"配列形式のレスポンスではありません ({resource})",
                url=url,
            )
        return payload

    def fetch_establishment_detail(
        self, establishment_id: Union[int, str]
    ) -> Dict[str, Any]:
        """
        事業所詳細を取得

        Args:
            establishment_id: 事業所 ID

        Returns:
            Dict[str, Any]: 事業所詳細の生 JSON オブジェクト

        Raises:
            TransportError: HTTP エラー・接続エラー発生時
            DecodeError: JSON デコード失敗時、またはオブジェクト以外が返された場合
        """
        url = f"{self.base_url}/{self.RESOURCE_PATHS[self.ESTABLISHMENTS]}/{establishment_id}"
        payload = self._get_json(url)

        if not isinstance(payload, dict):
            raise DecodeError("オブジェクト形式のレスポンスではありません", url=url)
        return payload

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET リクエストを送信し JSON をデコード

        Args:
            url: リクエスト URL
            params: クエリパラメータ

        Returns:
            Any: デコード済み JSON

        Raises:
            TransportError: HTTP エラー・接続エラー発生時
            DecodeError: JSON デコード失敗時
        """
        response = None
        try:
            response = requests.get(
                url,
                params=params,
                headers=self.HEADERS,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise TransportError(
                f"HTTP エラー: {e}",
                url=url,
                status_code=response.status_code if response is not None else None,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"ネットワークエラー: {e}",
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            # requests.JSONDecodeError は ValueError のサブクラス
            raise DecodeError(f"JSON デコードエラー: {e}", url=url)
