"""
インフラストラクチャ層

ファイル・標準出力への書き出しなどの外部システム依存を提供します。
"""

from .output_writer import OutputWriter

__all__ = ["OutputWriter"]
