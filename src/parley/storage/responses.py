"""インメモリの回答ストア。"""

import logging

from parley.models.errors import InvalidOptionError, UnknownQuestionError
from parley.models.survey import SurveyCatalog

logger = logging.getLogger(__name__)

# 未回答を表す値。clearで書き込まれる値と同一
UNANSWERED = ""


class ResponseStore:
    """質問ID→回答値のマッピング。UIとツールの両方が書き込む唯一の可変状態。

    セッション中のみ保持し、永続化はしない。書き込みはチャネルを問わず
    後勝ちで、マージや競合検出は行わない。

    strict=Falseの場合、カタログ外の質問IDや定義外の選択肢もそのまま保存する。
    strict=Trueの場合はストア境界で拒否する。
    """

    def __init__(self, catalog: SurveyCatalog, *, strict: bool = False) -> None:
        self._catalog = catalog
        self._strict = strict
        self._values: dict[int, str] = {}

    @property
    def catalog(self) -> SurveyCatalog:
        return self._catalog

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def total_questions(self) -> int:
        return len(self._catalog)

    def _validate(self, question_id: int, value: str) -> None:
        question = self._catalog.get(question_id)
        if question is None:
            raise UnknownQuestionError(question_id)
        if question.kind == "multiple-choice" and value and value not in question.options:
            raise InvalidOptionError(question_id, value)

    def set(self, question_id: int, value: str) -> None:
        """回答を上書き保存する。

        Raises:
            UnknownQuestionError: strictモードでカタログ外の質問IDが指定された場合。
            InvalidOptionError: strictモードで定義外の選択肢が指定された場合。
        """
        if self._strict:
            self._validate(question_id, value)
        elif self._catalog.get(question_id) is None:
            logger.warning("Storing answer for question %s outside the catalog", question_id)
        self._values[question_id] = value
        logger.debug("responses[%s] = %r", question_id, value)

    def clear(self, question_id: int) -> None:
        """回答を未回答に戻す。"""
        self._values[question_id] = UNANSWERED
        logger.debug("responses[%s] cleared", question_id)

    def get(self, question_id: int) -> str:
        return self._values.get(question_id, UNANSWERED)

    def is_answered(self, question_id: int) -> bool:
        return bool(self.get(question_id))

    def completion_count(self) -> int:
        """回答済み（空でない値を持つ）カタログ質問の数を返す。"""
        return sum(1 for question_id in self._catalog.ids() if self.is_answered(question_id))

    def is_complete(self) -> bool:
        return self.completion_count() == self.total_questions

    def snapshot(self) -> dict[int, str]:
        """空でない回答のみを含む新しい辞書を返す。"""
        return {k: v for k, v in self._values.items() if v}
