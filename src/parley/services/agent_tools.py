"""会話エージェントが呼び出すrecord-answer / get-statusの実装。"""

import logging
from collections.abc import Callable
from typing import Any

from parley.models.survey import QuestionKind, SurveyStatus
from parley.models.voice import ToolSpec
from parley.services.briefing import RECORD_TOOL, STATUS_TOOL, build_status
from parley.storage.responses import ResponseStore

logger = logging.getLogger(__name__)

RECORD_DESCRIPTION = "Record a survey answer for a specific question"
STATUS_DESCRIPTION = "Get the current status of the survey including which questions have been answered"


class AgentToolAdapter:
    """回答ストアへの参照を保持し、呼び出し時点の最新状態を読み書きする。

    ストアのコピーは保持しない。エージェントは複数のストア更新をまたいで
    長く生存するため、毎回ストアを参照し直す必要がある。
    """

    def __init__(self, store: ResponseStore) -> None:
        self._store = store

    async def record_answer(self, question_id: int, answer: str, question_type: QuestionKind) -> str:
        """回答を保存し、確認メッセージを返す。

        カタログ外の質問IDも保存する（strictモードを除く）。

        Raises:
            UnknownQuestionError: strictモードでカタログ外の質問IDが指定された場合。
            InvalidOptionError: strictモードで定義外の選択肢が指定された場合。
        """
        logger.info("[record] question %s (%s): %r", question_id, question_type, answer)
        self._store.set(question_id, answer)
        acknowledgement = "Thank you for the detailed response!" if question_type == "long-text" else "Great choice!"
        return f"Answer recorded successfully for question {question_id}. {acknowledgement}"

    async def get_status(self) -> SurveyStatus:
        """回答状況を毎回再計算して返す。"""
        status = build_status(self._store)
        logger.info("[status] completed %d/%d", status.completed_questions, status.total_questions)
        return status

    def bind(self, is_current: Callable[[], bool]) -> list[ToolSpec]:
        """1つの音声セッションに紐づくツール定義を生成する。

        is_currentがFalseを返すようになった後（切断・再接続後）に届いた
        記録要求は破棄する。
        """

        async def record_survey_answer(questionId: int, answer: str, questionType: QuestionKind) -> str:
            if not is_current():
                logger.warning("[record] discarded answer for question %s from a closed session", questionId)
                return f"Session ended; answer for question {questionId} was not recorded."
            return await self.record_answer(questionId, answer, questionType)

        async def get_survey_status() -> dict[str, Any]:
            return (await self.get_status()).to_payload()

        return [
            ToolSpec(
                name=RECORD_TOOL,
                description=RECORD_DESCRIPTION,
                parameters={
                    "type": "object",
                    "properties": {
                        "questionId": {
                            "type": "number",
                            "description": "The ID of the question being answered",
                        },
                        "answer": {"type": "string", "description": "The answer provided by the user"},
                        "questionType": {
                            "type": "string",
                            "enum": ["multiple-choice", "long-text"],
                            "description": "The type of question being answered",
                        },
                    },
                    "required": ["questionId", "answer", "questionType"],
                },
                handler=record_survey_answer,
            ),
            ToolSpec(
                name=STATUS_TOOL,
                description=STATUS_DESCRIPTION,
                parameters={"type": "object", "properties": {}},
                handler=get_survey_status,
            ),
        ]
