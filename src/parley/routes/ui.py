"""画面向けのHTTPエンドポイント定義。"""

import json
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from parley.models.errors import ParleyError, UnknownQuestionError
from parley.services.briefing import build_status
from parley.services.survey import SurveyService
from parley.services.voice import VoiceConnectionController
from parley.storage.responses import ResponseStore


def _error_response(e: ParleyError) -> JSONResponse:
    status_code = 404 if isinstance(e, UnknownQuestionError) else 422
    return JSONResponse({"error": type(e).__name__, "message": str(e)}, status_code=status_code)


def register_survey_routes(mcp: FastMCP, survey_service: SurveyService, store: ResponseStore) -> None:
    """回答の表示・編集・エクスポート用エンドポイントを登録する。"""

    @mcp.custom_route("/survey", methods=["GET"])
    async def get_survey(request: Request) -> JSONResponse:
        completed, total = survey_service.progress()
        return JSONResponse(
            {
                "title": store.catalog.title,
                "description": store.catalog.description,
                "questions": store.catalog.model_dump()["questions"],
                "progress": {"completed": completed, "total": total},
                "status": build_status(store).to_payload(),
            }
        )

    @mcp.custom_route("/survey/answers/{question_id:int}", methods=["PUT"])
    async def put_answer(request: Request) -> JSONResponse:
        question_id: int = request.path_params["question_id"]
        try:
            body = await request.json()
        except json.JSONDecodeError:
            return JSONResponse({"error": "BadRequest", "message": "Body must be JSON"}, status_code=400)
        value = body.get("value") if isinstance(body, dict) else None
        if not isinstance(value, str):
            return JSONResponse({"error": "BadRequest", "message": "'value' must be a string"}, status_code=400)

        try:
            saved = survey_service.update_answer(question_id, value)
        except ParleyError as e:
            return _error_response(e)
        completed, total = survey_service.progress()
        return JSONResponse({"questionId": question_id, "value": saved, "completed": completed, "total": total})

    @mcp.custom_route("/survey/answers/{question_id:int}", methods=["DELETE"])
    async def delete_answer(request: Request) -> JSONResponse:
        question_id: int = request.path_params["question_id"]
        if store.catalog.get(question_id) is None:
            return _error_response(UnknownQuestionError(question_id))
        survey_service.clear_answer(question_id)
        completed, total = survey_service.progress()
        return JSONResponse({"questionId": question_id, "completed": completed, "total": total})

    @mcp.custom_route("/survey/export", methods=["GET"])
    async def export_responses(request: Request) -> Response:
        return PlainTextResponse(survey_service.export_responses())


def register_voice_routes(mcp: FastMCP, controller: VoiceConnectionController) -> None:
    """音声アシスタントの接続トグルとトランスクリプト用エンドポイントを登録する。"""

    def _voice_status() -> dict[str, Any]:
        return {
            "state": controller.state,
            "generation": controller.generation,
            "messages": len(controller.transcript),
        }

    @mcp.custom_route("/voice/toggle", methods=["POST"])
    async def toggle_voice(request: Request) -> JSONResponse:
        await controller.toggle()
        return JSONResponse(_voice_status())

    @mcp.custom_route("/voice/status", methods=["GET"])
    async def voice_status(request: Request) -> JSONResponse:
        return JSONResponse({**_voice_status(), "notifications": controller.drain_notifications()})

    @mcp.custom_route("/voice/transcript", methods=["GET"])
    async def voice_transcript(request: Request) -> JSONResponse:
        entries = [entry.model_dump(mode="json") for entry in controller.transcript.entries]
        return JSONResponse({"entries": entries})
