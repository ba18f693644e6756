"""音声チャネルの接続ライフサイクルを管理するサービス。"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from parley.models.voice import (
    AgentConfig,
    ConnectionState,
    TokenIssuer,
    TranscriptHandler,
    VoiceBackend,
    VoiceSession,
)
from parley.services.agent_tools import AgentToolAdapter
from parley.services.briefing import build_briefing
from parley.services.transcript import TranscriptLog, parse_turn
from parley.storage.responses import ResponseStore

logger = logging.getLogger(__name__)

# 外部セッションが会話ターンを通知するイベント名
TRANSCRIPT_EVENT = "transcript_item"

DEFAULT_READY_MESSAGE = (
    "Voice Assistant is ready! Say 'Hello' or start speaking about any question to begin your conversation."
)


class VoiceConnectionController:
    """disconnected / connecting / connected の状態遷移を管理する。

    外部セッションのハンドルはこのクラスだけが保持する。connecting中の
    トグル要求は無視する（キューイングしない）ため、連打されても
    外部セッションが二重に生成されることはない。

    接続ごとに世代番号を進め、古い世代のトランスクリプトイベントや
    ツール呼び出しによる書き込みは破棄する。
    """

    def __init__(
        self,
        store: ResponseStore,
        adapter: AgentToolAdapter,
        token_issuer: TokenIssuer,
        backend: VoiceBackend,
        *,
        agent_name: str = "Survey Assistant",
        model: str = "gpt-4o-realtime-preview-2025-06-03",
        ready_delay: float = 0.5,
        ready_message: str = DEFAULT_READY_MESSAGE,
        on_notify: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._adapter = adapter
        self._token_issuer = token_issuer
        self._backend = backend
        self._agent_name = agent_name
        self._model = model
        self._ready_delay = ready_delay
        self._ready_message = ready_message
        self._on_notify = on_notify

        self._state: ConnectionState = "disconnected"
        self._session: VoiceSession | None = None
        self._handler: TranscriptHandler | None = None
        self._generation = 0
        self._transcript = TranscriptLog()
        self._notifications: list[str] = []
        self._notify_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def transcript(self) -> TranscriptLog:
        return self._transcript

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def drain_notifications(self) -> list[str]:
        """未表示の通知を取り出す。各通知は一度だけ返される。"""
        pending, self._notifications = self._notifications, []
        return pending

    def _transition(self, new_state: ConnectionState) -> None:
        logger.info("[voice] %s -> %s", self._state, new_state)
        self._state = new_state

    async def toggle(self) -> ConnectionState:
        """切断中なら接続し、接続中なら切断する。

        Returns:
            処理後の接続状態。
        """
        if self._state == "connecting":
            logger.info("[voice] Connection already in progress, ignoring toggle")
            return self._state
        if self._state == "connected":
            await self._disconnect()
        else:
            await self._connect()
        return self._state

    async def aclose(self) -> None:
        """サーバー停止時に接続中のセッションを閉じる。"""
        if self._state == "connected":
            await self._disconnect()
        self._cancel_ready_notification()

    def build_agent_config(self, generation: int) -> AgentConfig:
        """現在の回答状況からエージェント設定を組み立てる。"""
        return AgentConfig(
            name=self._agent_name,
            instructions=build_briefing(self._store),
            tools=self._adapter.bind(lambda: self._generation == generation),
            model=self._model,
        )

    async def _connect(self) -> None:
        self._transition("connecting")
        session: VoiceSession | None = None
        handler: TranscriptHandler | None = None
        try:
            token = await self._token_issuer.issue_session_token()
            self._generation += 1
            generation = self._generation
            session = self._backend.create_session(self.build_agent_config(generation))
            handler = self._make_transcript_handler(generation)
            session.on(TRANSCRIPT_EVENT, handler)
            await session.connect(token)
        except Exception:
            logger.exception("[voice] Failed to connect")
            await self._rollback_connect(session, handler)
            return
        except asyncio.CancelledError:
            logger.warning("[voice] Connect cancelled")
            await self._rollback_connect(session, handler)
            raise

        self._session = session
        self._handler = handler
        self._transcript.reset()
        self._transition("connected")
        logger.info("[voice] Voice agent connected (generation %d)", generation)
        self._schedule_ready_notification(generation)

    async def _rollback_connect(self, session: VoiceSession | None, handler: TranscriptHandler | None) -> None:
        # 生成途中のハンドルは保持せず、状態を先に戻してから閉じる
        self._generation += 1
        self._transition("disconnected")
        if session is not None:
            await self._close_session(session, handler)

    async def _disconnect(self) -> None:
        self._transition("connecting")
        self._generation += 1
        session, handler = self._session, self._handler
        self._session = None
        self._handler = None
        self._cancel_ready_notification()
        try:
            if session is not None:
                await self._close_session(session, handler)
            logger.info("[voice] Voice agent disconnected")
        finally:
            self._transition("disconnected")

    async def _close_session(self, session: VoiceSession, handler: TranscriptHandler | None) -> None:
        """外部セッションを閉じる。登録解除やcloseの失敗はログに記録するのみ。"""
        off = getattr(session, "off", None)
        if off is not None and handler is not None:
            try:
                off(TRANSCRIPT_EVENT, handler)
            except Exception:
                logger.exception("[voice] Failed to unsubscribe transcript handler")
        try:
            await session.close()
        except Exception:
            logger.exception("[voice] Error closing voice session")

    def _make_transcript_handler(self, generation: int) -> TranscriptHandler:
        def handle(item: Any) -> None:
            if generation != self._generation or self._state != "connected":
                logger.debug("[voice] Dropping transcript event from generation %d", generation)
                return
            entry = parse_turn(item)
            if entry is not None:
                self._transcript.append(entry)

        return handle

    def _schedule_ready_notification(self, generation: int) -> None:
        self._cancel_ready_notification()
        self._notify_task = asyncio.get_running_loop().create_task(self._notify_ready(generation))

    def _cancel_ready_notification(self) -> None:
        if self._notify_task is not None and not self._notify_task.done():
            self._notify_task.cancel()
        self._notify_task = None

    async def _notify_ready(self, generation: int) -> None:
        await asyncio.sleep(self._ready_delay)
        if generation != self._generation:
            return
        self._notifications.append(self._ready_message)
        if self._on_notify is not None:
            try:
                self._on_notify(self._ready_message)
            except Exception:
                logger.exception("[voice] Ready notification callback failed")
