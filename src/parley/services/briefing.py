"""回答ストアから会話エージェント向けのブリーフィングと回答状況を導出する。

どちらも回答ストアの現在値から毎回計算する純粋関数で、結果をキャッシュしない。
"""

from parley.models.survey import Question, QuestionStatus, SurveyStatus
from parley.storage.responses import ResponseStore

RECORD_TOOL = "recordSurveyAnswer"
STATUS_TOOL = "getSurveyStatus"


def build_status(store: ResponseStore) -> SurveyStatus:
    """回答状況のスナップショットを生成する。"""
    responses = store.snapshot()
    questions_status = [
        QuestionStatus(
            question_id=q.id,
            question=q.text,
            type=q.kind,
            answered=q.id in responses,
            answer=responses.get(q.id),
        )
        for q in store.catalog.questions
    ]
    completed = store.completion_count()
    return SurveyStatus(
        total_questions=store.total_questions,
        completed_questions=completed,
        is_complete=completed == store.total_questions,
        responses=responses,
        questions_status=questions_status,
    )


def _question_block(index: int, question: Question, answer: str) -> str:
    lines = [f'Question {index} (ID: {question.id}): "{question.text}"', f"Type: {question.kind}"]
    if question.options:
        options = "; ".join(f"{j}. {opt}" for j, opt in enumerate(question.options, start=1))
        lines.append(f"Options: {options}")
    if question.guidance:
        lines.append(f"Guidance: {question.guidance}")
    if answer:
        lines.append("Status at briefing time: answered (confirm with getSurveyStatus before relying on it)")
    else:
        lines.append("Status at briefing time: open")
    return "\n".join(lines)


def _progress_section(store: ResponseStore) -> str:
    open_questions = [q for q in store.catalog.questions if not store.is_answered(q.id)]
    if not open_questions:
        return (
            "## Progress\n\n"
            f"All {store.total_questions} questions have an answer. Thank the user, remind them they can "
            "review or change any answer by typing or speaking, and ask them to click the "
            "Stop Voice Assistant button to end the conversation.\n"
        )
    next_question = open_questions[0]
    open_ids = ", ".join(str(q.id) for q in open_questions)
    return (
        "## Progress\n\n"
        f"{store.completion_count()} of {store.total_questions} questions answered. "
        f"Open questions: {open_ids}. "
        f"Suggest question {next_question.id} next.\n"
    )


def build_briefing(store: ResponseStore) -> str:
    """会話エージェントの行動指示を生成する。

    質問カタログ全体、質問ごとのガイダンス、未回答の質問を埋め込むため、
    回答が変わるたびに再生成する必要がある。
    """
    catalog = store.catalog
    questions = "\n\n".join(
        _question_block(i, q, store.get(q.id)) for i, q in enumerate(catalog.questions, start=1)
    )
    mc_ids = [str(q.id) for q in catalog.questions if q.kind == "multiple-choice"]
    text_ids = [str(q.id) for q in catalog.questions if q.kind == "long-text"]

    return (
        f"You are a voice based professional {catalog.title} Assistant that drives the conversation "
        "forward and STAYS STRICTLY ON TOPIC. Your role is to help users complete this survey by having "
        "a conversation with them and recording their answers.\n\n"
        "## Stay on topic\n\n"
        f"- You ONLY discuss the {catalog.title} questions and responses.\n"
        "- If users try to discuss other topics, politely redirect them back to the survey.\n"
        "- Do NOT provide general assistance, jokes, or discussion unrelated to the survey.\n\n"
        "## Dynamic survey status\n\n"
        f"- Always use the `{STATUS_TOOL}` tool to get the current, up-to-date survey status.\n"
        "- Responses may change in the UI during the conversation; never rely on earlier status.\n\n"
        "## All questions\n\n"
        f"{questions}\n\n"
        "## Form-based interaction\n\n"
        "- Users can work on ANY question at ANY time; there is no current question.\n"
        + (f"- Multiple choice questions ({', '.join(mc_ids)}): users answer with the UI buttons.\n" if mc_ids else "")
        + (
            f"- Long-text questions ({', '.join(text_ids)}): users can type or speak. Save spoken answers with "
            f"`{RECORD_TOOL}`, which also updates the text field in the UI.\n"
            if text_ids
            else ""
        )
        + "- If the user already typed something, ask whether to add to it or replace it.\n"
        "- If users want to change an answer, record the new answer; the latest answer wins.\n\n"
        "## Greeting\n\n"
        f"As soon as you connect, greet the user, explain that there are {len(catalog)} questions that can be "
        f"answered in any order, then call `{STATUS_TOOL}` and continue with the next open question.\n\n"
        + _progress_section(store)
        + "\n## Response style\n\n"
        "- You are a voice assistant: use proper punctuation, sentence structure and tone.\n"
        "- Drive the conversation forward and recommend the next open question.\n"
        "- Be conversational but professional, and thank users for their responses.\n"
    )
