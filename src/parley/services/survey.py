"""画面操作による回答の更新と回答のエクスポートを行うサービス。"""

import logging

from parley.models.errors import InvalidOptionError, QuestionKindMismatchError, UnknownQuestionError
from parley.models.survey import Question
from parley.storage.responses import ResponseStore

logger = logging.getLogger(__name__)

NO_RESPONSE_PLACEHOLDER = "No response provided"


class SurveyService:
    """UIチャネルからの回答操作。

    選択式の質問についてはUIが選択肢の検証を担う。ツール経由の書き込みは
    この検証を通らないため、回答ストアのstrictモードでのみ拒否される。
    """

    def __init__(self, store: ResponseStore) -> None:
        self._store = store

    def _require_question(self, question_id: int) -> Question:
        question = self._store.catalog.get(question_id)
        if question is None:
            raise UnknownQuestionError(question_id)
        return question

    def select_option(self, question_id: int, option: str) -> str:
        """選択式の質問の選択肢を選ぶ。

        Raises:
            UnknownQuestionError: 質問IDがカタログに存在しない場合。
            QuestionKindMismatchError: 選択式ではない質問の場合。
            InvalidOptionError: 定義外の選択肢の場合。
        """
        question = self._require_question(question_id)
        if question.kind != "multiple-choice":
            raise QuestionKindMismatchError(question_id, "multiple-choice", question.kind)
        if option not in question.options:
            raise InvalidOptionError(question_id, option)
        logger.info("[ui] question %s selected %r", question_id, option)
        self._store.set(question_id, option)
        return option

    def type_answer(self, question_id: int, text: str) -> str:
        """記述式の質問の入力欄を更新する。空文字列も許容する。

        Raises:
            UnknownQuestionError: 質問IDがカタログに存在しない場合。
            QuestionKindMismatchError: 記述式ではない質問の場合。
        """
        question = self._require_question(question_id)
        if question.kind != "long-text":
            raise QuestionKindMismatchError(question_id, "long-text", question.kind)
        logger.debug("[ui] question %s typed %d characters", question_id, len(text))
        self._store.set(question_id, text)
        return text

    def update_answer(self, question_id: int, value: str) -> str:
        """質問の種別に応じてselect_optionまたはtype_answerに振り分ける。"""
        question = self._require_question(question_id)
        if question.kind == "multiple-choice":
            return self.select_option(question_id, value)
        return self.type_answer(question_id, value)

    def clear_answer(self, question_id: int) -> None:
        """回答をクリアして未回答に戻す。"""
        logger.info("[ui] question %s cleared", question_id)
        self._store.clear(question_id)

    def progress(self) -> tuple[int, int]:
        """(回答済み数, 全質問数)を返す。"""
        return self._store.completion_count(), self._store.total_questions

    def export_responses(self) -> str:
        """全質問と回答をコピー用のテキストブロックに整形する。"""
        parts: list[str] = []
        for i, question in enumerate(self._store.catalog.questions, start=1):
            answer = self._store.get(question.id) or NO_RESPONSE_PLACEHOLDER
            parts.append(f"Question {i}: {question.text}\n\nResponse: {answer}\n\n---\n\n")
        return "".join(parts)
