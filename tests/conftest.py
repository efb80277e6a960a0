from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from lodestone.request import RequestDescriptor

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURE_DIR / name).read_text(encoding="utf-8")


class StubTransport:
    """固定のHTMLを返す（または例外を送出する）同期トランスポート。"""

    def __init__(self, html: str = "", error: Optional[BaseException] = None):
        self.html = html
        self.error = error
        self.descriptors: List[RequestDescriptor] = []

    def dispatch(self, descriptor: RequestDescriptor) -> str:
        self.descriptors.append(descriptor)
        if self.error is not None:
            raise self.error
        return self.html


class AsyncStubTransport(StubTransport):
    """StubTransport の非同期版。"""

    async def dispatch(self, descriptor: RequestDescriptor) -> str:
        return StubTransport.dispatch(self, descriptor)


@pytest.fixture
def fixture_html():
    return load_fixture


@pytest.fixture
def stub_transport():
    return StubTransport


@pytest.fixture
def async_stub_transport():
    return AsyncStubTransport
