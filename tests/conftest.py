"""テスト共通フィクスチャ。"""

import asyncio
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from parley.config import ServerConfig
from parley.models.survey import SurveyCatalog
from parley.models.voice import AgentConfig, TranscriptHandler
from parley.services.agent_tools import AgentToolAdapter
from parley.services.catalog import load_catalog
from parley.services.survey import SurveyService
from parley.services.voice import VoiceConnectionController
from parley.storage.responses import ResponseStore


class FakeVoiceSession:
    """音声バックエンドのセッションを模したテスト用実装。

    offが呼ばれてもハンドラー参照は保持し、emitで呼び出せる。
    登録解除をサポートしないバックエンドからの遅延イベントを再現するため。
    """

    def __init__(
        self,
        config: AgentConfig,
        *,
        connect_gate: asyncio.Event | None = None,
        connect_error: Exception | None = None,
        close_error: Exception | None = None,
        off_error: Exception | None = None,
    ) -> None:
        self.config = config
        self.handler: TranscriptHandler | None = None
        self.event: str | None = None
        self.unsubscribed = False
        self.token: str | None = None
        self.closed = False
        self._connect_gate = connect_gate
        self._connect_error = connect_error
        self._close_error = close_error
        self._off_error = off_error

    def on(self, event: str, handler: TranscriptHandler) -> None:
        self.event = event
        self.handler = handler

    def off(self, event: str, handler: TranscriptHandler) -> None:
        if self._off_error is not None:
            raise self._off_error
        self.unsubscribed = True

    async def connect(self, token: str) -> None:
        if self._connect_gate is not None:
            await self._connect_gate.wait()
        if self._connect_error is not None:
            raise self._connect_error
        self.token = token

    async def close(self) -> None:
        self.closed = True
        if self._close_error is not None:
            raise self._close_error

    def emit(self, item: Any) -> None:
        assert self.handler is not None
        self.handler(item)


class FakeVoiceBackend:
    """生成したセッションを記録するテスト用音声バックエンド。"""

    def __init__(self) -> None:
        self.sessions: list[FakeVoiceSession] = []
        self.connect_gate: asyncio.Event | None = None
        self.connect_error: Exception | None = None
        self.close_error: Exception | None = None
        self.off_error: Exception | None = None

    def create_session(self, config: AgentConfig) -> FakeVoiceSession:
        session = FakeVoiceSession(
            config,
            connect_gate=self.connect_gate,
            connect_error=self.connect_error,
            close_error=self.close_error,
            off_error=self.off_error,
        )
        self.sessions.append(session)
        return session


@pytest.fixture
def config_dir() -> Path:
    """設定ファイルディレクトリ。"""
    return Path(__file__).parent.parent / "config"


@pytest.fixture
def catalog(config_dir: Path) -> SurveyCatalog:
    """参照用の3問カタログ。"""
    return load_catalog(config_dir)


@pytest.fixture
def store(catalog: SurveyCatalog) -> ResponseStore:
    """テスト用ResponseStore。"""
    return ResponseStore(catalog)


@pytest.fixture
def strict_store(catalog: SurveyCatalog) -> ResponseStore:
    """strictモードのResponseStore。"""
    return ResponseStore(catalog, strict=True)


@pytest.fixture
def survey_service(store: ResponseStore) -> SurveyService:
    """テスト用SurveyService。"""
    return SurveyService(store)


@pytest.fixture
def adapter(store: ResponseStore) -> AgentToolAdapter:
    """テスト用AgentToolAdapter。"""
    return AgentToolAdapter(store)


@pytest.fixture
def token_issuer() -> AsyncMock:
    """固定トークンを返すトークン発行元。"""
    issuer = AsyncMock()
    issuer.issue_session_token.return_value = "ek_test_token"
    return issuer


@pytest.fixture
def voice_backend() -> FakeVoiceBackend:
    """テスト用音声バックエンド。"""
    return FakeVoiceBackend()


@pytest.fixture
def controller(
    store: ResponseStore,
    adapter: AgentToolAdapter,
    token_issuer: AsyncMock,
    voice_backend: FakeVoiceBackend,
) -> VoiceConnectionController:
    """通知遅延なしのVoiceConnectionController。"""
    return VoiceConnectionController(store, adapter, token_issuer, voice_backend, ready_delay=0)


@pytest.fixture
def server_config(config_dir: Path) -> ServerConfig:
    """テスト用ServerConfig。"""
    return ServerConfig(config_dir=config_dir, ready_notification_delay=0)
