"""
Lodestone クライアント固有の例外定義モジュール。

通信失敗・HTTPステータス異常・HTML解析失敗・検索条件の語彙エラーを
一つの基底例外の下に並列に定義する。各例外は他の例外を包み隠さない。
"""

from __future__ import annotations

from typing import Optional


class LodestoneError(Exception):
    """Lodestone クライアント全体の基底例外。"""

    retryable = False


class TransportError(LodestoneError):
    """接続失敗・タイムアウトなど通信レベルの失敗。呼び出し側で再試行できる。"""

    retryable = True

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class HttpStatusError(LodestoneError):
    """
    200番台以外のHTTPステータスを受け取った場合の例外。

    404 はキャラクターIDが存在しないことを意味し、それ以外のコードとは区別される。
    """

    def __init__(self, code: int, url: str = ""):
        super().__init__(f"HTTP {code}: {url}" if url else f"HTTP {code}")
        self.code = code
        self.url = url

    @property
    def not_found(self) -> bool:
        return self.code == 404


class ParseError(LodestoneError):
    """
    ページ取得には成功したが、期待する構造が存在しない・不正な場合の例外。

    無効なIDか、サイト側のマークアップ変更を示すため再試行しても回復しない。
    """

    def __init__(self, context: str, detail: str = ""):
        message = f"{context} not found" if not detail else f"{context}: {detail}"
        super().__init__(message)
        self.context = context


class InvalidFilterError(LodestoneError, ValueError):
    """検索条件の文字列が既知の語彙（データセンター名など）に一致しない場合の例外。"""

    def __init__(self, vocabulary: str, value: object):
        super().__init__(f"Unknown {vocabulary}: {value!r}")
        self.vocabulary = vocabulary
        self.value = value
