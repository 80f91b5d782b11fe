"""OutputWriter のユニットテスト"""

import io
import json
import pytest

from src.sisbi_aggregator.infrastructure.output_writer import OutputWriter
from src.sisbi_aggregator.domain.models import MergedEstablishment, SpeciesCapacities


class TestOutputWriter:
    """OutputWriter のテストケース"""

    @pytest.fixture
    def sample_payload(self):
        """サンプル出力（結合済みレコードの JSON）"""
        return [
            MergedEstablishment(
                id=1,
                name="Frigorífico Central",
                state_code="GO",
                municipality_name="Goiânia",
                status_code="A",
                tax_id="11222333000144",
                capacities=SpeciesCapacities(bovine=10, bovine_hourly=3),
            ).model_dump(mode="json")
        ]

    def test_write_output_creates_directory(self, tmp_path, sample_payload):
        """出力ディレクトリが自動作成されることを確認"""
        output_path = tmp_path / "output" / "establishments.json"

        OutputWriter().write_output(sample_payload, output_path)

        assert output_path.parent.is_dir()
        assert output_path.is_file()

    def test_write_output_returns_path(self, tmp_path, sample_payload):
        """書き込んだファイルパスを返すことを確認"""
        output_path = tmp_path / "establishments.json"
        assert OutputWriter().write_output(sample_payload, output_path) == output_path

    def test_write_output_json_content(self, tmp_path, sample_payload):
        """JSON の内容が保持されることを確認"""
        output_path = tmp_path / "establishments.json"
        OutputWriter().write_output(sample_payload, output_path)

        with open(output_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        assert data == sample_payload
        assert data[0]["capacities"]["bovine_hourly"] == 3

    def test_write_output_keeps_non_ascii(self, tmp_path, sample_payload):
        """非 ASCII 文字をエスケープせずに保存することを確認"""
        output_path = tmp_path / "establishments.json"
        OutputWriter().write_output(sample_payload, output_path)

        content = output_path.read_text(encoding="utf-8")
        assert "Goiânia" in content
        assert "\\u" not in content

    def test_write_output_to_stream(self, sample_payload):
        """ファイル未指定の場合はストリームに出力することを確認"""
        stream = io.StringIO()

        result = OutputWriter(stream=stream).write_output({"error": "Internal server error"})

        assert result is None
        assert json.loads(stream.getvalue()) == {"error": "Internal server error"}

    def test_write_output_is_byte_identical(self, tmp_path, sample_payload):
        """同一入力で同一のバイト列を出力することを確認"""
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"

        OutputWriter().write_output(sample_payload, first)
        OutputWriter().write_output(sample_payload, second)

        assert first.read_bytes() == second.read_bytes()
