"""
文字列正規化ユーティリティ。

Lodestone の HTML から取り出したテキストの揺れ（改行・ノーブレークスペース・
全角空白・引用符やハイフンの表記揺れ）を吸収する。
表示用の clean_text、語彙照合用の normalize_text、数値用の parse_int を提供する。
"""

from __future__ import annotations

import re
import unicodedata
from typing import Optional


_HYPHEN_CHARS = [
    "‐", "‒", "–", "—", "―", "−",
]

_QUOTE_MAP = {
    "“": '"',
    "”": '"',
    "„": '"',
    "‟": '"',
    "’": "'",
    "‘": "'",
    "‚": "'",
    "‛": "'",
}

# "-" / "--" は Lodestone 上で「未設定」を表す
_UNSET_MARKERS = {"", "-", "--"}


def clean_text(s: Optional[str]) -> str:
    """
    表示用テキストを整形して返す。大文字小文字は保持する。

    整形内容:
    - ノーブレークスペース・全角スペース・改行/タブを半角スペースへ置換
    - 引用符の統一
    - trim
    - 連続空白を単一化

    Args:
        s: 入力文字列。

    Returns:
        整形済み文字列。入力が None の場合は空文字を返す。
    """
    if s is None:
        return ""

    s = s.replace("\u00a0", " ").replace("\u3000", " ")
    s = s.replace("\n", " ").replace("\r", " ").replace("\t", " ")

    for k, v in _QUOTE_MAP.items():
        s = s.replace(k, v)

    s = s.strip()
    s = re.sub(r"\s+", " ", s)
    return s


def normalize_text(s: Optional[str]) -> str:
    """
    語彙照合用に文字列を正規化して返す。

    clean_text の整形に加えて、Unicode正規化 (NFKC)・ハイフン類の統一・小文字化を行う。

    Args:
        s: 入力文字列。

    Returns:
        正規化済み文字列。入力が None の場合は空文字を返す。
    """
    if s is None:
        return ""

    s = unicodedata.normalize("NFKC", s)
    s = clean_text(s)

    for c in _HYPHEN_CHARS:
        s = s.replace(c, "-")

    return s.lower()


def parse_int(s: Optional[str]) -> Optional[int]:
    """
    数値テキストを int に変換する。変換できなければ None を返す（例外は送出しない）。

    "1,387,000" のような桁区切りは除去し、"-" / "--" / 空文字は未設定として扱う。

    Args:
        s: 入力文字列。

    Returns:
        数値 または None。
    """
    text = clean_text(s).replace(",", "")
    if text in _UNSET_MARKERS:
        return None

    if not re.fullmatch(r"\d+", text):
        return None

    return int(text)
