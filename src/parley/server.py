"""FastMCPベースのMCPサーバーエントリポイント。"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse

from parley.config import ServerConfig
from parley.models.voice import TokenIssuer, VoiceBackend
from parley.prompts.survey import register_survey_prompts
from parley.resources.survey import register_survey_resources
from parley.routes.ui import register_survey_routes, register_voice_routes
from parley.services.agent_tools import AgentToolAdapter
from parley.services.catalog import load_catalog
from parley.services.survey import SurveyService
from parley.services.voice import VoiceConnectionController
from parley.storage.responses import ResponseStore
from parley.tools.survey import register_survey_tools


def _build_server(
    config: ServerConfig | None,
    token_issuer: TokenIssuer | None,
    voice_backend: VoiceBackend | None,
) -> tuple[FastMCP, VoiceConnectionController | None]:
    if config is None:
        config = ServerConfig()

    mcp = FastMCP("parley")

    # 回答ストア（セッション中のみ保持）
    catalog = load_catalog(config.config_dir)
    store = ResponseStore(catalog, strict=config.strict_answers)

    # サービス層
    survey_service = SurveyService(store)
    adapter = AgentToolAdapter(store)

    # MCPインターフェース登録 — 会話エージェント向け
    register_survey_tools(mcp, adapter)
    register_survey_resources(mcp, store)
    register_survey_prompts(mcp, store)

    # 画面向けルート
    register_survey_routes(mcp, survey_service, store)

    controller: VoiceConnectionController | None = None
    if token_issuer is not None and voice_backend is not None:
        controller = VoiceConnectionController(
            store,
            adapter,
            token_issuer,
            voice_backend,
            agent_name=config.agent_name,
            model=config.realtime_model,
            ready_delay=config.ready_notification_delay,
            ready_message=config.ready_notification_message,
        )
        register_voice_routes(mcp, controller)

    # ヘルスチェックエンドポイント
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return mcp, controller


def create_server(
    config: ServerConfig | None = None,
    *,
    token_issuer: TokenIssuer | None = None,
    voice_backend: VoiceBackend | None = None,
) -> FastMCP:
    """Parley MCPサーバーを作成し、ツール・リソース・プロンプト・画面用ルートを登録する。

    Args:
        config: サーバー設定。Noneの場合はデフォルト設定を使用。
        token_issuer: 音声バックエンド用トークンの発行元。
        voice_backend: 音声バックエンド。token_issuerと両方指定された場合のみ
            音声アシスタント用ルートを登録する。

    Returns:
        設定済みのFastMCPインスタンス。
    """
    mcp, _ = _build_server(config, token_issuer, voice_backend)
    return mcp


def create_app(
    config: ServerConfig | None = None,
    *,
    token_issuer: TokenIssuer | None = None,
    voice_backend: VoiceBackend | None = None,
) -> Starlette:
    """streamable-httpのASGIアプリを作成する。

    音声アシスタントが有効な場合、アプリ停止時に接続中の音声セッションを閉じる。
    引数はcreate_serverと同じ。
    """
    mcp, controller = _build_server(config, token_issuer, voice_backend)
    app = mcp.http_app(transport="streamable-http")
    if controller is None:
        return app

    mcp_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(a: Starlette) -> AsyncIterator[None]:
        async with mcp_lifespan(a):
            try:
                yield
            finally:
                await controller.aclose()

    app.router.lifespan_context = lifespan
    return app
