"""
スクレイピング処理（通信部分）。

RequestDescriptor を HTTP GET に変換して送信し、レスポンスHTML文字列を返す責務を持つ。
HTMLの解析は parser.py 側で行い、本モジュールは通信のみを担当する。

同期版（requests）と非同期版（aiohttp）の 2 つのトランスポートを提供する。
どちらも prepare_request() で同じリクエスト（URL・ヘッダー・タイムアウト）を組み立てるため、
違いは待ち方（ブロックするか、イベントループへ制御を返すか）だけである。

例外方針:
- 接続失敗・タイムアウトは TransportError に変換して上位へ伝播する。
- 200番台以外のステータスは HttpStatusError(code) とする。
- 空のレスポンス本文はそのまま返す（解析側で ParseError になる）。
- asyncio.CancelledError は変換しない。
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp
import requests

from lodestone.config import DEFAULT_SETTINGS, Settings
from lodestone.errors import HttpStatusError, TransportError
from lodestone.request import RequestDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedRequest:
    """トランスポート共通の送信内容。"""

    method: str
    url: str
    headers: Dict[str, str]
    timeout: float


def prepare_request(descriptor: RequestDescriptor, settings: Settings = DEFAULT_SETTINGS) -> PreparedRequest:
    """
    記述子と設定から送信内容を組み立てる。

    Args:
        descriptor: 送信するリクエストの記述子。
        settings: 接続設定。

    Returns:
        PreparedRequest。メソッドは常に GET。
    """
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": settings.accept_language,
    }
    return PreparedRequest(
        method="GET",
        url=descriptor.url(settings.base_url),
        headers=headers,
        timeout=settings.timeout,
    )


def _check_status(status: int, url: str) -> None:
    if not 200 <= status < 300:
        logger.warning("HTTP %d: %s", status, url)
        raise HttpStatusError(status, url)


class RequestsTransport:
    """
    requests による同期トランスポート。

    呼び出し元のスレッドは HTTP のやり取りが終わるまでブロックする。
    session を渡さない場合は内部で requests.Session を作り、close() で閉じる。
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or DEFAULT_SETTINGS
        self._session = session if session is not None else requests.Session()
        self._owns_session = session is None

    def dispatch(self, descriptor: RequestDescriptor) -> str:
        """
        記述子のリクエストを送信し、レスポンスHTML文字列を返す。

        Raises:
            TransportError: 接続失敗・タイムアウトの場合。
            HttpStatusError: 200番台以外のステータスの場合。
        """
        req = prepare_request(descriptor, self.settings)
        logger.debug("GET %s", req.url)

        try:
            r = self._session.get(req.url, headers=req.headers, timeout=req.timeout)
        except requests.RequestException as e:
            logger.warning("HTTP fetch failed: %s (%s)", req.url, e)
            raise TransportError(f"HTTP fetch failed: {req.url} ({e})", cause=e) from e

        _check_status(r.status_code, req.url)
        if not r.encoding or r.encoding.lower() == "iso-8859-1":
            r.encoding = "utf-8"
        return r.text

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AiohttpTransport:
    """
    aiohttp による非同期トランスポート。

    待機するのはネットワーク応答の待ちだけで、その間は同じイベントループ上の他の処理が進む。
    session を渡さない場合は初回の dispatch で aiohttp.ClientSession を作り、close() で閉じる。
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[aiohttp.ClientSession] = None):
        self.settings = settings or DEFAULT_SETTINGS
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def dispatch(self, descriptor: RequestDescriptor) -> str:
        """
        記述子のリクエストを送信し、レスポンスHTML文字列を返す。

        Raises:
            TransportError: 接続失敗・タイムアウトの場合。
            HttpStatusError: 200番台以外のステータスの場合。
        """
        req = prepare_request(descriptor, self.settings)
        logger.debug("GET %s", req.url)

        session = self._get_session()
        try:
            async with session.get(
                req.url,
                headers=req.headers,
                timeout=aiohttp.ClientTimeout(total=req.timeout),
            ) as resp:
                _check_status(resp.status, req.url)
                return await resp.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("HTTP fetch failed: %s (%r)", req.url, e)
            raise TransportError(f"HTTP fetch failed: {req.url} ({e!r})", cause=e) from e

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
