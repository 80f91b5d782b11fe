"""JSON 出力コンポーネント"""

from typing import Any, Optional, TextIO
from pathlib import Path
import json
import sys


class OutputWriter:
    """
    パイプラインの出力を JSON として書き出す

    Responsibilities:
    - JSON 互換の値をファイルまたは標準出力に書き込み
    - 出力先ディレクトリ管理
    """

    def __init__(self, stream: Optional[TextIO] = None):
        """
        OutputWriter を初期化

        Args:
            stream: ファイル指定がない場合の出力先（None の場合は標準出力）
        """
        self.stream = stream

    def write_output(self, payload: Any, output_path: Optional[Path] = None) -> Optional[Path]:
        """
        JSON 互換の値を書き出す

        Args:
            payload: model_dump(mode="json") 済みの値
            output_path: 出力ファイルパス（None の場合はストリームに出力）

        Returns:
            Optional[Path]: 書き込んだファイルパス（ストリーム出力時は None）

        Note:
            - ensure_ascii=False で 'Suíno' などをそのまま保存
            - 同一入力に対して同一のバイト列を出力する
        """
        if output_path is None:
            stream = self.stream or sys.stdout
            json.dump(payload, stream, ensure_ascii=False, indent=2)
            stream.write("\n")
            return None

        # ディレクトリ自動作成
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

        return output_path
