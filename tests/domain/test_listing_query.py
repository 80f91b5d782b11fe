"""一覧クエリ（検索・牛フィルター・ページ分割）のユニットテスト"""

import pytest
from pydantic import ValidationError

from src.sisbi_aggregator.domain.listing_query import (
    ListingQuery,
    filter_establishments,
    paginate,
)
from src.sisbi_aggregator.domain.models import MergedEstablishment, SpeciesCapacities


@pytest.fixture
def records():
    """結合済みレコードのサンプル"""
    return [
        MergedEstablishment(
            id=1, name="Frigorífico Goiás", state_code="GO", municipality_name="Goiânia",
            status_code="A", tax_id="11222333000144",
            capacities=SpeciesCapacities(bovine=100),
        ),
        MergedEstablishment(
            id=2, name="Suinocultura Paulista", state_code="SP", municipality_name="Campinas",
            status_code="P", tax_id="55666777000188",
            capacities=SpeciesCapacities(swine=300),
        ),
        MergedEstablishment(
            id=3, name="Abatedouro Mineiro", state_code="MG", municipality_name="Uberaba",
            status_code="A", tax_id="N/A",
            capacities=SpeciesCapacities(bovine_hourly=20),
        ),
    ]


class TestListingQuery:
    """クエリパラメータのテスト"""

    def test_defaults(self):
        """既定値"""
        query = ListingQuery()
        assert query.search_term == ""
        assert query.bovine_only is False
        assert query.page == 1
        assert query.page_size == 20

    def test_query_is_immutable(self):
        """クエリは変更できないこと"""
        query = ListingQuery()
        with pytest.raises(ValidationError):
            query.page = 2

    def test_invalid_page(self):
        """ページ番号は 1 以上"""
        with pytest.raises(ValidationError):
            ListingQuery(page=0)


class TestFilterEstablishments:
    """フィルターのテスト"""

    def test_no_filters_returns_all(self, records):
        """条件なしは全件"""
        assert filter_establishments(records, ListingQuery()) == records

    def test_bovine_only_includes_hourly_only_establishments(self, records):
        """牛フィルターは日量または時間量を持つ事業所を残すこと"""
        result = filter_establishments(records, ListingQuery(bovine_only=True))
        assert [record.id for record in result] == [1, 3]

    def test_search_is_case_insensitive_on_text_fields(self, records):
        """事業所名・州・市町村は大文字小文字を区別しないこと"""
        assert [r.id for r in filter_establishments(records, ListingQuery(search_term="frigorífico"))] == [1]
        assert [r.id for r in filter_establishments(records, ListingQuery(search_term="sp"))] == [2]
        assert [r.id for r in filter_establishments(records, ListingQuery(search_term="UBERABA"))] == [3]

    def test_search_by_tax_id(self, records):
        """CNPJ の部分一致で検索できること"""
        result = filter_establishments(records, ListingQuery(search_term="55666"))
        assert [record.id for record in result] == [2]

    def test_bovine_filter_and_search_combined(self, records):
        """牛フィルターと検索を同時に適用できること"""
        result = filter_establishments(
            records, ListingQuery(search_term="a", bovine_only=True)
        )
        assert [record.id for record in result] == [1, 3]


class TestPaginate:
    """ページ分割のテスト"""

    def test_first_page(self, records):
        """先頭ページ"""
        page = paginate(records, ListingQuery(page_size=2))
        assert [record.id for record in page.items] == [1, 2]
        assert page.total == 3
        assert page.total_pages == 2

    def test_last_page(self, records):
        """最終ページは残りの件数のみ"""
        page = paginate(records, ListingQuery(page=2, page_size=2))
        assert [record.id for record in page.items] == [3]

    def test_out_of_range_page_is_empty(self, records):
        """範囲外のページは空"""
        page = paginate(records, ListingQuery(page=5, page_size=2))
        assert page.items == []
        assert page.total == 3

    def test_empty_records(self):
        """0 件の場合は総ページ数 0"""
        page = paginate([], ListingQuery())
        assert page.total == 0
        assert page.total_pages == 0
