"""SurveyServiceのユニットテスト。"""

import pytest

from parley.models.errors import InvalidOptionError, QuestionKindMismatchError, UnknownQuestionError
from parley.services.survey import NO_RESPONSE_PLACEHOLDER, SurveyService
from parley.storage.responses import ResponseStore

OPTION = "I have been able to achieve notable results and improvements"


class TestSelectOption:
    def test_select_declared_option(self, survey_service: SurveyService, store: ResponseStore) -> None:
        survey_service.select_option(1, OPTION)
        assert store.get(1) == OPTION

    def test_reselect_replaces_previous_option(self, survey_service: SurveyService, store: ResponseStore) -> None:
        survey_service.select_option(1, OPTION)
        survey_service.select_option(1, "I have not been able to apply it in my work")
        assert store.get(1) == "I have not been able to apply it in my work"

    def test_undeclared_option_raises_error(self, survey_service: SurveyService, store: ResponseStore) -> None:
        with pytest.raises(InvalidOptionError):
            survey_service.select_option(1, "Option A")
        assert store.get(1) == ""

    def test_long_text_question_raises_error(self, survey_service: SurveyService) -> None:
        with pytest.raises(QuestionKindMismatchError):
            survey_service.select_option(2, OPTION)

    def test_unknown_question_raises_error(self, survey_service: SurveyService) -> None:
        with pytest.raises(UnknownQuestionError):
            survey_service.select_option(42, OPTION)


class TestTypeAnswer:
    def test_type_answer_stores_text(self, survey_service: SurveyService, store: ResponseStore) -> None:
        survey_service.type_answer(3, "More training please")
        assert store.get(3) == "More training please"

    def test_typing_empty_text_unanswers(self, survey_service: SurveyService, store: ResponseStore) -> None:
        survey_service.type_answer(3, "draft")
        survey_service.type_answer(3, "")
        assert store.is_answered(3) is False

    def test_multiple_choice_question_raises_error(self, survey_service: SurveyService) -> None:
        with pytest.raises(QuestionKindMismatchError):
            survey_service.type_answer(1, "free text")

    def test_update_answer_dispatches_by_kind(self, survey_service: SurveyService, store: ResponseStore) -> None:
        survey_service.update_answer(1, OPTION)
        survey_service.update_answer(2, "typed")
        assert store.get(1) == OPTION
        assert store.get(2) == "typed"

    def test_update_answer_validates_options(self, survey_service: SurveyService) -> None:
        with pytest.raises(InvalidOptionError):
            survey_service.update_answer(1, "typed")


class TestClearAndProgress:
    def test_clear_answer(self, survey_service: SurveyService) -> None:
        survey_service.type_answer(2, "text")
        assert survey_service.progress() == (1, 3)
        survey_service.clear_answer(2)
        assert survey_service.progress() == (0, 3)


class TestExportResponses:
    def test_export_uses_placeholder_for_unanswered(self, survey_service: SurveyService, store: ResponseStore) -> None:
        store.set(2, "We use it for X")
        text = survey_service.export_responses()

        blocks = text.split("---\n\n")
        assert f"Response: {NO_RESPONSE_PLACEHOLDER}" in blocks[0]
        assert "Response: We use it for X" in blocks[1]
        assert f"Response: {NO_RESPONSE_PLACEHOLDER}" in blocks[2]
        assert text.count(NO_RESPONSE_PLACEHOLDER) == 2

    def test_export_format(self, survey_service: SurveyService, store: ResponseStore) -> None:
        store.set(1, OPTION)
        text = survey_service.export_responses()
        question = store.catalog.questions[0].text
        assert text.startswith(f"Question 1: {question}\n\nResponse: {OPTION}\n\n---\n\n")
        assert text.count("Question ") == 3

    def test_cleared_answer_exports_placeholder(self, survey_service: SurveyService, store: ResponseStore) -> None:
        store.set(3, "feedback")
        survey_service.clear_answer(3)
        assert survey_service.export_responses().count(NO_RESPONSE_PLACEHOLDER) == 3
