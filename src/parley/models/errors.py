"""Parleyのカスタム例外クラス。"""


class ParleyError(Exception):
    """Parleyの基底例外クラス。"""


class CatalogError(ParleyError):
    """質問カタログの読み込み・検証エラー。"""


class UnknownQuestionError(ParleyError):
    """カタログに存在しない質問IDが指定された場合の例外。"""

    def __init__(self, question_id: int) -> None:
        super().__init__(f"Unknown question: {question_id}")
        self.question_id = question_id


class InvalidOptionError(ParleyError):
    """選択式の質問に定義外の選択肢が指定された場合の例外。"""

    def __init__(self, question_id: int, value: str) -> None:
        super().__init__(f"Invalid option for question {question_id}: {value!r}")
        self.question_id = question_id
        self.value = value


class QuestionKindMismatchError(ParleyError):
    """質問の種別と操作が一致しない場合の例外。"""

    def __init__(self, question_id: int, expected: str, actual: str) -> None:
        super().__init__(f"Question {question_id} is {actual}, not {expected}")
        self.question_id = question_id
        self.expected = expected
        self.actual = actual
