"""CLI エントリーポイントのテスト"""

import json

import pytest
from unittest.mock import Mock, patch

from src.sisbi_aggregator.__main__ import main, build_service
from src.sisbi_aggregator.domain.models import (
    MergedEstablishment,
    SlaughterThroughput,
    SpeciesCapacities,
)
from src.sisbi_aggregator.orchestration.aggregation_service import FailurePolicy, ListingResult


def _listing_result():
    """成功した一覧結果"""
    return ListingResult(
        success=True,
        establishments=[
            MergedEstablishment(id=1, name="Abc", state_code="GO", status_code="A",
                                capacities=SpeciesCapacities(bovine=10)),
            MergedEstablishment(id=2, name="Def", state_code="SP", status_code="P",
                                capacities=SpeciesCapacities(swine=5)),
        ],
    )


class TestCLI:
    """CLI エントリーポイントのテストケース"""

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_listing_success_exits_with_zero(self, mock_build_service, capsys):
        """一覧成功時に終了コード 0 で JSON 配列を出力することを確認"""
        mock_service = Mock()
        mock_service.run_listing.return_value = _listing_result()
        mock_build_service.return_value = mock_service

        with pytest.raises(SystemExit) as exc_info:
            main(["listing"])

        assert exc_info.value.code == 0
        output = json.loads(capsys.readouterr().out)
        assert [record["id"] for record in output] == [1, 2]

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_listing_bovine_only(self, mock_build_service, capsys):
        """--bovine-only で牛の能力を持つ事業所のみ出力することを確認"""
        mock_service = Mock()
        mock_service.run_listing.return_value = _listing_result()
        mock_build_service.return_value = mock_service

        with pytest.raises(SystemExit):
            main(["listing", "--bovine-only"])

        output = json.loads(capsys.readouterr().out)
        assert [record["id"] for record in output] == [1]

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_listing_page(self, mock_build_service, capsys):
        """--page 指定時はページオブジェクトを出力することを確認"""
        mock_service = Mock()
        mock_service.run_listing.return_value = _listing_result()
        mock_build_service.return_value = mock_service

        with pytest.raises(SystemExit):
            main(["listing", "--page", "2", "--page-size", "1"])

        output = json.loads(capsys.readouterr().out)
        assert output["total"] == 2
        assert output["total_pages"] == 2
        assert [record["id"] for record in output["items"]] == [2]

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_listing_failure_exits_with_one(self, mock_build_service, capsys):
        """一覧失敗時に終了コード 1 でエラーエンベロープを出力することを確認"""
        mock_service = Mock()
        mock_service.run_listing.return_value = ListingResult(
            success=False, error="Internal server error"
        )
        mock_build_service.return_value = mock_service

        with pytest.raises(SystemExit) as exc_info:
            main(["listing"])

        assert exc_info.value.code == 1
        assert json.loads(capsys.readouterr().out) == {"error": "Internal server error"}

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_detail_writes_output_file(self, mock_build_service, tmp_path):
        """detail の結果をファイルに出力することを確認"""
        mock_service = Mock()
        mock_service.run_detail.return_value = SlaughterThroughput(bovine=7)
        mock_build_service.return_value = mock_service
        output_path = tmp_path / "detail.json"

        with pytest.raises(SystemExit) as exc_info:
            main(["detail", "42", "--output", str(output_path)])

        assert exc_info.value.code == 0
        mock_service.run_detail.assert_called_once_with("42")
        assert json.loads(output_path.read_text(encoding="utf-8"))["bovine"] == 7

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_stats(self, mock_build_service, capsys):
        """stats で状態別サマリーと州別統計を出力することを確認"""
        mock_service = Mock()
        mock_service.run_listing.return_value = _listing_result()
        mock_build_service.return_value = mock_service

        with pytest.raises(SystemExit) as exc_info:
            main(["stats", "--sort", "alphabetical"])

        assert exc_info.value.code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["summary"] == {"total": 2, "active": 1, "pending": 1, "other": 0}
        assert [state["state_code"] for state in output["states"]] == ["GO", "SP"]
        assert output["totals"] == {
            "state_count": 2,
            "establishment_count": 2,
            "active_count": 1,
            "with_bovine": 1,
            "bovine_capacity": 10,
        }

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_stats_totals_with_bovine_filter(self, mock_build_service, capsys):
        """--bovine-only 時の総計は牛事業所を持つ州のみを対象とすることを確認"""
        mock_service = Mock()
        mock_service.run_listing.return_value = _listing_result()
        mock_build_service.return_value = mock_service

        with pytest.raises(SystemExit):
            main(["stats", "--bovine-only"])

        output = json.loads(capsys.readouterr().out)
        assert [state["state_code"] for state in output["states"]] == ["GO"]
        assert output["totals"]["state_count"] == 1
        assert output["totals"]["establishment_count"] == 1

    @pytest.mark.parametrize("argv", [
        ["listing", "--page-size", "0"],
        ["listing", "--page", "-1"],
        ["listing", "--page", "abc"],
    ])
    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_invalid_page_arguments_are_rejected(self, mock_build_service, argv):
        """ページ番号・ページサイズが正の整数でない場合は引数エラーで終了することを確認"""
        with pytest.raises(SystemExit) as exc_info:
            main(argv)

        assert exc_info.value.code == 2
        mock_build_service.assert_not_called()

    @patch('src.sisbi_aggregator.__main__.build_service')
    def test_unexpected_exception_exits_with_one(self, mock_build_service):
        """予期しない例外時に終了コード 1 で終了することを確認"""
        mock_build_service.side_effect = Exception("Unexpected error")

        with pytest.raises(SystemExit) as exc_info:
            main(["listing"])

        assert exc_info.value.code == 1


class TestBuildService:
    """環境変数からの設定読み込みのテスト"""

    def test_defaults(self, monkeypatch):
        """環境変数未設定時の既定値"""
        for name in ("SISBI_API_BASE_URL", "SISBI_TIMEOUT",
                     "SISBI_ESTABLISHMENTS_POLICY", "SISBI_CAPACITIES_POLICY"):
            monkeypatch.delenv(name, raising=False)

        service = build_service()

        assert service.client.base_url == "https://sistemasweb.agricultura.gov.br/sisbi_api"
        assert service.client.timeout == 30
        assert service.policies["establishments"] == FailurePolicy.FATAL
        assert service.policies["capacities"] == FailurePolicy.DEGRADE

    def test_environment_overrides(self, monkeypatch):
        """環境変数で設定を上書きできること"""
        monkeypatch.setenv("SISBI_API_BASE_URL", "http://localhost:9000")
        monkeypatch.setenv("SISBI_TIMEOUT", "5")
        monkeypatch.setenv("SISBI_CAPACITIES_POLICY", "fatal")

        service = build_service()

        assert service.client.base_url == "http://localhost:9000"
        assert service.client.timeout == 5
        assert service.policies["capacities"] == FailurePolicy.FATAL
