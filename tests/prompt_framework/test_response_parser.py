"""
Tests for ResponseParser.
"""

import json

import pytest

from prompt_framework.exceptions import ParseError, SchemaError
from prompt_framework.synthesis.response_parser import ResponseParser, extract_json_text
from prompt_framework.synthesis.schemas import (
    ResponseKind,
    FinalResultResponse,
    CompletePromptResponse,
)


@pytest.fixture
def parser():
    return ResponseParser()


class TestExtractJson:
    def test_strips_surrounding_prose(self):
        raw = 'Here you go:\n```json\n{"generatedText": "x"}\n```\nEnjoy!'
        assert extract_json_text(raw) == '{"generatedText": "x"}'

    def test_no_braces_is_parse_error(self):
        with pytest.raises(ParseError) as exc:
            extract_json_text("just words")
        assert exc.value.raw == "just words"

    def test_none_is_parse_error(self):
        with pytest.raises(ParseError):
            extract_json_text(None)


class TestParse:
    def test_prose_wrapped_final_result(self, parser, final_result_reply):
        raw = f"Sure! {json.dumps(final_result_reply)} Hope that helps."

        response = parser.parse(raw, ResponseKind.FINAL_RESULT)

        assert isinstance(response, FinalResultResponse)
        assert response.enhanced_prompt == final_result_reply["enhanced_prompt"]
        assert response.to_result().lazy_tweaks[0]["emoji"] == "😄"

    def test_invalid_json_is_parse_error(self, parser):
        with pytest.raises(ParseError):
            parser.parse('{"generatedText": "unterminated}', ResponseKind.COMPLETE_PROMPT)

    def test_missing_field_is_schema_error(self, parser):
        with pytest.raises(SchemaError) as exc:
            parser.parse('{"lazy_tweaks": []}', ResponseKind.FINAL_RESULT)
        assert exc.value.kind == "final_result"
        assert exc.value.errors

    def test_extra_fields_are_ignored(self, parser):
        response = parser.parse(
            '{"generatedText": "x", "mood": "happy"}', ResponseKind.COMPLETE_PROMPT
        )
        assert isinstance(response, CompletePromptResponse)
        assert response.lazy_tweaks == []

    def test_score_out_of_range_is_schema_error(self, parser):
        with pytest.raises(SchemaError):
            parser.parse(
                '{"enhanced_prompt": "x", "laziness_score": 11}',
                ResponseKind.PRELIMINARY_RESULT,
            )

    def test_unknown_score_label_is_schema_error(self, parser):
        raw = '{"score": 50, "score_label": "Meh", "suggested_questions": {}}'
        with pytest.raises(SchemaError):
            parser.parse(raw, ResponseKind.ANALYSIS)

    def test_ukrainian_score_label_accepted(self, parser):
        raw = '{"score": 90, "score_label": "Відмінно", "suggested_questions": {}}'
        assert parser.parse(raw, ResponseKind.ANALYSIS).score == 90


class TestQuestionConversion:
    def test_guided_questions_are_capped(self, parser, guided_questions_reply):
        guided_questions_reply["questions"].append({"question": "Sixth?"})
        response = parser.parse(_dumps(guided_questions_reply), ResponseKind.GUIDED_QUESTIONS)

        questions = parser.guided_questions(response, 5)

        assert len(questions) == 5
        assert questions[0].key == "question_0_Question_number_1?"
        assert questions[0].options[0].emoji == "🅰️"

    def test_topic_questions_drop_duplicate_topics(self, parser, topic_questions_reply):
        topic_questions_reply["questions"].append(
            {"topic": "Goal", "question": "Again?", "options": []}
        )
        response = parser.parse(_dumps(topic_questions_reply), ResponseKind.SECOND_ROUND_QUESTIONS)

        questions = parser.topic_questions(response, 2)

        assert len(questions) == 6
        assert questions[0].key == "round2_goal"
        assert questions[0].prompt_text == "What about goal?"

    def test_analysis_questions_follow_category_order(self, parser):
        raw = _dumps({
            "score": 70,
            "score_label": "Good",
            "suggested_questions": {
                "format": [{"question": "Which format?", "type": "text"}],
                "goals": [{"question": "Main goal?", "type": "select",
                           "options": [{"text": "Sell"}, {"text": "Teach"}]}],
            },
        })
        response = parser.parse(raw, ResponseKind.ANALYSIS)

        questions, summary = parser.analysis_questions(response)

        assert [q.category for q in questions] == ["goals", "format"]
        assert [o.text for o in questions[0].options] == ["Sell", "Teach"]
        assert questions[1].key == "iter1_question_1_Which_format?"
        assert summary == {"score": 70, "score_label": "Good"}

    def test_analysis_keys_differ_between_iterations(self, parser, analysis_reply):
        response = parser.parse(_dumps(analysis_reply), ResponseKind.ANALYSIS)

        first, _ = parser.analysis_questions(response, 1)
        second, _ = parser.analysis_questions(response, 2)

        assert second[0].key == "iter2_question_0_What_is_the_purpose_"
        assert not {q.key for q in first} & {q.key for q in second}


def _dumps(data) -> str:
    return json.dumps(data, ensure_ascii=False)


def test_tweak_reply_with_leading_prose(parser):
    raw = 'Sure! Here you go: {"enhanced_prompt":"X"}'
    assert parser.parse(raw, ResponseKind.TWEAK).enhanced_prompt == "X"
