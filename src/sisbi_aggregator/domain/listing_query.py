"""
一覧クエリ

検索語・牛フィルター・ページ指定を不変のクエリパラメータとして表現し、
結合済みレコードに適用します。
"""

import math
from typing import List
from pydantic import BaseModel, ConfigDict, Field

from .models import MergedEstablishment


class ListingQuery(BaseModel):
    """一覧表示用の不変クエリパラメータ"""

    model_config = ConfigDict(frozen=True)

    search_term: str = Field(default="", description="検索語（事業所名・CNPJ・州・市町村）")
    bovine_only: bool = Field(default=False, description="牛の能力を持つ事業所のみ")
    page: int = Field(default=1, ge=1, description="ページ番号（1 始まり）")
    page_size: int = Field(default=20, ge=1, description="1 ページあたりの件数")


class ListingPage(BaseModel):
    """ページ分割済みの一覧"""

    items: List[MergedEstablishment] = Field(default_factory=list, description="当該ページのレコード")
    total: int = Field(default=0, description="フィルター適用後の総件数")
    page: int = Field(default=1, description="ページ番号")
    total_pages: int = Field(default=0, description="総ページ数")


def matches_search(record: MergedEstablishment, search_term: str) -> bool:
    """
    検索語に一致するか

    事業所名・州・市町村は大文字小文字を区別せず、CNPJ は区別して部分一致を判定します。
    """
    if not search_term:
        return True
    term = search_term.lower()
    return (
        term in record.name.lower()
        or search_term in record.tax_id
        or term in record.state_code.lower()
        or term in record.municipality_name.lower()
    )


def filter_establishments(
    records: List[MergedEstablishment], query: ListingQuery
) -> List[MergedEstablishment]:
    """
    クエリのフィルター条件を適用（牛フィルター → 検索の順）

    Args:
        records: 結合済みレコード
        query: 一覧クエリ

    Returns:
        List[MergedEstablishment]: 入力順を保ったフィルター結果
    """
    result = records
    if query.bovine_only:
        result = [record for record in result if record.capacities.has_bovine]
    if query.search_term:
        result = [record for record in result if matches_search(record, query.search_term)]
    return list(result)


def paginate(records: List[MergedEstablishment], query: ListingQuery) -> ListingPage:
    """
    フィルター適用後にページ分割

    Args:
        records: 結合済みレコード
        query: 一覧クエリ

    Returns:
        ListingPage: 範囲外のページは items が空
    """
    filtered = filter_establishments(records, query)
    start = (query.page - 1) * query.page_size
    return ListingPage(
        items=filtered[start:start + query.page_size],
        total=len(filtered),
        page=query.page,
        total_pages=math.ceil(len(filtered) / query.page_size),
    )
