"""
アダプター層

SISBI レジストリ API への HTTP アクセスを提供します。
"""

from .upstream_client import UpstreamClient, UpstreamError, TransportError, DecodeError
from .sisbi_client import SisbiClient

__all__ = [
    "UpstreamClient",
    "UpstreamError",
    "TransportError",
    "DecodeError",
    "SisbiClient",
]
