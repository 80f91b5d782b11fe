"""
上流 API クライアント抽象基底クラス

SISBI レジストリ API へのアクセスを抽象化するインターフェースと、
上流呼び出し時に発生する例外クラスを定義します。
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union


class UpstreamError(Exception):
    """
    上流 API エラーの基底例外

    TransportError と DecodeError の共通親クラスです。
    """

    def __init__(self, message: str, url: Optional[str] = None):
        """
        Args:
            message: エラーメッセージ
            url: エラーが発生した URL
        """
        super().__init__(message)
        self.url = url


class TransportError(UpstreamError):
    """
    転送エラー例外

    HTTP エラーステータス、接続タイムアウト、DNS 解決失敗などを表します。
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        """
        Args:
            message: エラーメッセージ
            url: エラーが発生した URL
            status_code: HTTP ステータスコード（該当する場合）
        """
        super().__init__(message, url=url)
        self.status_code = status_code


class DecodeError(UpstreamError):
    """
    デコードエラー例外

    レスポンス本文が JSON として解釈できない場合、
    または想定した形（配列・オブジェクト）でない場合を表します。
    """


class UpstreamClient(ABC):
    """
    上流レジストリ API クライアント抽象基底クラス

    一覧系リソース（establishments, capacities）と
    事業所詳細リソースへの読み取り専用アクセスを提供します。
    """

    ESTABLISHMENTS = "establishments"
    CAPACITIES = "capacities"

    @abstractmethod
    def fetch_collection(
        self, resource: str, page: int, page_size: int
    ) -> List[Dict[str, Any]]:
        """
        一覧リソースの 1 ページを取得

        Args:
            resource: リソース名（"establishments" または "capacities"）
            page: ページ番号（0 始まり）
            page_size: 1 ページあたりの件数

        Returns:
            List[Dict[str, Any]]: 型付けされていない生レコードの配列

        Raises:
            TransportError: HTTP エラー・接続エラー発生時
            DecodeError: JSON デコード失敗時
        """
        pass

    @abstractmethod
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
            DecodeError: JSON デコード失敗時
        """
        pass
