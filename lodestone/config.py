"""
設定ファイル(settings.yaml)の読み込み処理を提供するモジュール。

settings.yaml から Lodestone への接続に必要な設定を読み込み、
アプリ内で扱いやすい dataclass に変換する。
TLS バックエンドや同期/非同期の選択は、トランスポートを生成する側で行う。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import yaml


DEFAULT_BASE_URL = "https://na.finalfantasyxiv.com"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    """
    Lodestone クライアント設定。

    Attributes:
        base_url: Lodestone のホスト（リージョン別サブドメインを含む）。
        timeout: 1リクエストあたりのタイムアウト秒。
        user_agent: 送信する User-Agent。
        accept_language: 送信する Accept-Language。
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "en-US,en;q=0.9"


DEFAULT_SETTINGS = Settings()


def load_settings(path: Optional[str] = None) -> Settings:
    """
    settings.yaml を読み込み Settings に変換する。

    path が None の場合、またはファイルの `lodestone` セクションが無い場合は既定値を使う。

    Args:
        path: settings.yaml のファイルパス。

    Returns:
        Settingsオブジェクト。

    Raises:
        FileNotFoundError: 設定ファイルが存在しない場合。
        yaml.YAMLError: YAMLのパースに失敗した場合。
        ValueError: timeout の float 変換に失敗した場合。
    """
    if path is None:
        return DEFAULT_SETTINGS

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    section = data.get("lodestone") or {}

    return Settings(
        base_url=str(section.get("base_url", DEFAULT_BASE_URL)).strip().rstrip("/"),
        timeout=float(section.get("timeout", DEFAULT_SETTINGS.timeout)),
        user_agent=str(section.get("user_agent", DEFAULT_USER_AGENT)),
        accept_language=str(section.get("accept_language", DEFAULT_SETTINGS.accept_language)),
    )
