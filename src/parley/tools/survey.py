"""会話エージェント向けのMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from parley.models.errors import ParleyError
from parley.models.survey import QuestionKind
from parley.services.agent_tools import RECORD_DESCRIPTION, STATUS_DESCRIPTION, AgentToolAdapter
from parley.services.briefing import RECORD_TOOL, STATUS_TOOL


def register_survey_tools(mcp: FastMCP, adapter: AgentToolAdapter) -> None:
    """アンケート関連のMCPツールを登録する。"""

    @mcp.tool(name=RECORD_TOOL, description=RECORD_DESCRIPTION)
    async def record_survey_answer(
        questionId: int,  # noqa: N803
        answer: str,
        questionType: QuestionKind,  # noqa: N803
    ) -> dict[str, Any]:
        """アンケート回答を記録する。

        Args:
            questionId: 回答対象の質問ID。
            answer: 利用者の回答。
            questionType: 質問の種別（multiple-choice / long-text）。
        """
        try:
            message = await adapter.record_answer(questionId, answer, questionType)
            return {"questionId": questionId, "message": message}
        except ParleyError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool(name=STATUS_TOOL, description=STATUS_DESCRIPTION)
    async def get_survey_status() -> dict[str, Any]:
        """回答状況を取得する。

        回答は画面操作でも変化するため、状況を確認するたびに呼び出してください。
        """
        status = await adapter.get_status()
        return status.to_payload()
