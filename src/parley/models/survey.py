"""アンケート質問と回答状況のデータモデル。"""

from typing import Any, Literal

from pydantic import BaseModel, Field

QuestionKind = Literal["multiple-choice", "long-text"]


class Question(BaseModel):
    """アンケートの個別質問。種別はセッション中に変化しない。"""

    id: int
    kind: QuestionKind
    text: str
    options: list[str] = Field(default_factory=list)
    guidance: str = ""


class SurveyCatalog(BaseModel):
    """固定の質問カタログ。質問は提示順に並ぶ。"""

    title: str
    description: str = ""
    questions: list[Question]

    def __len__(self) -> int:
        return len(self.questions)

    def get(self, question_id: int) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def ids(self) -> list[int]:
        return [q.id for q in self.questions]


class QuestionStatus(BaseModel):
    """get-statusで返す質問単位の回答状況。"""

    question_id: int = Field(serialization_alias="questionId")
    question: str
    type: QuestionKind
    answered: bool
    answer: str | None = None


class SurveyStatus(BaseModel):
    """回答状況のスナップショット。呼び出しのたびに再計算される。"""

    total_questions: int = Field(serialization_alias="totalQuestions")
    completed_questions: int = Field(serialization_alias="completedQuestions")
    is_complete: bool = Field(serialization_alias="isComplete")
    responses: dict[int, str] = Field(default_factory=dict)
    questions_status: list[QuestionStatus] = Field(default_factory=list, serialization_alias="questionsStatus")

    def to_payload(self) -> dict[str, Any]:
        """ツール応答用のcamelCase辞書に変換する。"""
        payload = self.model_dump(by_alias=True)
        payload["responses"] = {str(k): v for k, v in self.responses.items()}
        return payload
