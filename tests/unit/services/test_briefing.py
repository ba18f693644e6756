"""ブリーフィングと回答状況の導出のユニットテスト。"""

from parley.services.briefing import RECORD_TOOL, STATUS_TOOL, build_briefing, build_status
from parley.storage.responses import ResponseStore


class TestBuildStatus:
    def test_empty_store(self, store: ResponseStore) -> None:
        status = build_status(store)
        assert status.total_questions == 3
        assert status.completed_questions == 0
        assert status.is_complete is False
        assert status.responses == {}
        assert [q.answered for q in status.questions_status] == [False, False, False]
        assert all(q.answer is None for q in status.questions_status)

    def test_questions_follow_catalog_order(self, store: ResponseStore) -> None:
        status = build_status(store)
        assert [q.question_id for q in status.questions_status] == [1, 2, 3]
        assert [q.type for q in status.questions_status] == ["multiple-choice", "long-text", "long-text"]
        assert status.questions_status[1].question == store.catalog.questions[1].text

    def test_reflects_answers(self, store: ResponseStore) -> None:
        store.set(2, "We use it for X")
        status = build_status(store)
        assert status.completed_questions == 1
        assert status.responses == {2: "We use it for X"}
        assert status.questions_status[1].answered is True
        assert status.questions_status[1].answer == "We use it for X"

    def test_cleared_answer_reported_unanswered(self, store: ResponseStore) -> None:
        store.set(2, "text")
        store.set(3, "more")
        store.clear(2)
        status = build_status(store)
        assert status.completed_questions == 1
        assert status.questions_status[1].answered is False
        assert status.questions_status[1].answer is None

    def test_complete(self, store: ResponseStore) -> None:
        store.set(1, store.catalog.questions[0].options[0])
        store.set(2, "two")
        store.set(3, "three")
        assert build_status(store).is_complete is True


class TestBuildBriefing:
    def test_contains_full_catalog(self, store: ResponseStore) -> None:
        briefing = build_briefing(store)
        for question in store.catalog.questions:
            assert question.text in briefing
            for option in question.options:
                assert option in briefing

    def test_mentions_tools(self, store: ResponseStore) -> None:
        briefing = build_briefing(store)
        assert STATUS_TOOL in briefing
        assert RECORD_TOOL in briefing

    def test_lists_open_questions(self, store: ResponseStore) -> None:
        briefing = build_briefing(store)
        assert "0 of 3 questions answered" in briefing
        assert "Open questions: 1, 2, 3" in briefing
        assert "Suggest question 1 next" in briefing

    def test_regenerated_after_mutation(self, store: ResponseStore) -> None:
        before = build_briefing(store)
        store.set(1, store.catalog.questions[0].options[2])
        after = build_briefing(store)
        assert before != after
        assert "Open questions: 2, 3" in after
        assert "Suggest question 2 next" in after

    def test_all_answered(self, store: ResponseStore) -> None:
        store.set(1, store.catalog.questions[0].options[0])
        store.set(2, "two")
        store.set(3, "three")
        briefing = build_briefing(store)
        assert "All 3 questions have an answer" in briefing
        assert "Open questions" not in briefing

    def test_does_not_mutate_store(self, store: ResponseStore) -> None:
        store.set(2, "text")
        build_briefing(store)
        build_status(store)
        assert store.snapshot() == {2: "text"}
