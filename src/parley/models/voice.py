"""音声チャネル関連のデータモデルと外部コラボレーターの契約。"""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field

ConnectionState = Literal["disconnected", "connecting", "connected"]
SpeakerRole = Literal["user", "assistant"]

TranscriptHandler = Callable[[Any], None]


class TranscriptEntry(BaseModel):
    """会話トランスクリプトの1ターン。"""

    role: SpeakerRole
    text: str
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ToolSpec(BaseModel):
    """会話エージェントに渡すツール定義。"""

    name: str
    description: str
    parameters: dict[str, Any]
    handler: Callable[..., Awaitable[Any]]


class AgentConfig(BaseModel):
    """音声バックエンドに渡すエージェント設定。"""

    name: str
    instructions: str
    tools: list[ToolSpec]
    model: str


class TokenIssuer(Protocol):
    """音声バックエンド用の一時トークンを発行する。"""

    async def issue_session_token(self) -> str: ...


class VoiceSession(Protocol):
    """音声バックエンドのセッションハンドル。"""

    async def connect(self, token: str) -> None: ...

    async def close(self) -> None: ...

    def on(self, event: str, handler: TranscriptHandler) -> None: ...


class VoiceBackend(Protocol):
    """エージェント設定からセッションを生成する音声バックエンド。"""

    def create_session(self, config: AgentConfig) -> VoiceSession: ...
