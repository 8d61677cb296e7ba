"""
Tests for PromptSessionController: effect execution, version recording,
failure atomicity and the single in-flight call rule.
"""

import asyncio
import json
import threading

import pytest

from prompt_framework.exceptions import (
    NetworkError,
    ParseError,
    RoundIncompleteError,
    SchemaError,
    SynthesisInProgressError,
    VersionNotFoundError,
)
from prompt_framework.llm.mock import MockProvider
from prompt_framework.session import QuestionKind, SessionMode, SessionPhase
from prompt_framework.session.controller import PromptSessionController
from prompt_framework.synthesis.generation import GenerationClient


class BlockingProvider(MockProvider):
    """Mock provider whose calls wait until the test releases them."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.entered = threading.Event()
        self.release = threading.Event()

    def generate(self, messages, **kwargs):
        self.entered.set()
        self.release.wait(timeout=5)
        return super().generate(messages, **kwargs)


async def _wait_for(event: threading.Event):
    while not event.is_set():
        await asyncio.sleep(0.01)


def _payload(provider, call=-1) -> dict:
    return json.loads(provider.calls[call][1]["content"])


class TestSuperLazy:
    @pytest.mark.asyncio
    async def test_start_produces_version_one(self, controller, mock_provider):
        mock_provider.set_response({"generatedText": "A complete prompt", "lazy_tweaks": []})

        session = await controller.start("write email", SessionMode.SUPER_LAZY)

        assert session.phase is SessionPhase.MAX_ITERATIONS_REACHED
        assert session.current_text == "A complete prompt"
        versions = controller.versions()
        assert [v.version for v in versions] == [1]
        assert versions[0].generated_text == "A complete prompt"
        assert session.current_version_id == versions[0].id
        assert _payload(mock_provider) == {"originalInput": "write email"}

    @pytest.mark.asyncio
    async def test_unparsable_reply_leaves_session_unchanged(self, controller, mock_provider):
        mock_provider.set_response("Sorry, I cannot help with that.")

        with pytest.raises(ParseError):
            await controller.start("write email", SessionMode.SUPER_LAZY)

        assert controller.session.phase is SessionPhase.IDLE
        assert controller.versions() == []
        assert not controller.in_flight

    @pytest.mark.asyncio
    async def test_schema_mismatch_is_schema_error(self, controller, mock_provider):
        mock_provider.set_response({"text": "wrong field"})

        with pytest.raises(SchemaError):
            await controller.start("write email", SessionMode.SUPER_LAZY)
        assert controller.session.phase is SessionPhase.IDLE

    @pytest.mark.asyncio
    async def test_provider_failure_is_network_error(self, controller, mock_provider):
        mock_provider.set_response(ConnectionError("down"))

        with pytest.raises(NetworkError):
            await controller.start("write email", SessionMode.SUPER_LAZY)

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, controller, mock_provider):
        mock_provider.set_responses(["no json here", {"generatedText": "Second try"}])

        with pytest.raises(ParseError):
            await controller.start("write email", SessionMode.SUPER_LAZY)
        session = await controller.start("write email", SessionMode.SUPER_LAZY)

        assert session.current_text == "Second try"

    @pytest.mark.asyncio
    async def test_tweaks_append_versions(self, controller, mock_provider):
        mock_provider.set_responses([
            {"generatedText": "v1"},
            {"enhanced_prompt": "v2"},
            {"enhanced_prompt": "v3"},
        ])
        await controller.start("write email", SessionMode.SUPER_LAZY)
        await controller.tweak("shorter")
        session = await controller.tweak("friendlier")

        assert session.current_text == "v3"
        assert session.phase is SessionPhase.MAX_ITERATIONS_REACHED
        assert [v.version for v in controller.versions()] == [1, 2, 3]
        assert _payload(mock_provider)["tweak"] == "friendlier"
        assert _payload(mock_provider)["currentText"] == "v2"

    @pytest.mark.asyncio
    async def test_revert_to_earlier_version(self, controller, mock_provider):
        mock_provider.set_responses([{"generatedText": "v1"}, {"enhanced_prompt": "v2"}])
        await controller.start("write email", SessionMode.SUPER_LAZY)
        await controller.tweak("shorter")
        first = controller.versions()[0]

        session = await controller.revert_to(first.id)

        assert session.current_text == "v1"
        assert session.current_version_id == first.id

    @pytest.mark.asyncio
    async def test_revert_to_foreign_version_fails(self, controller, mock_provider):
        mock_provider.set_response({"generatedText": "v1"})
        await controller.start("write email", SessionMode.SUPER_LAZY)
        foreign = controller.ledger.append("other", "other text")

        with pytest.raises(VersionNotFoundError):
            await controller.revert_to(foreign.id)


class TestGuided:
    @pytest.mark.asyncio
    async def test_full_guided_flow(self, controller, mock_provider,
                                    guided_questions_reply, final_result_reply):
        mock_provider.set_responses([guided_questions_reply, final_result_reply])

        session = await controller.start("write email", SessionMode.GUIDED_FIVE_QUESTION)
        assert len(session.questions) == 5
        assert session.current_question.prompt_text == "Question number 1?"

        await controller.submit_answer("Option A")
        await controller.submit_answer("Option B")
        await controller.submit_answer("Quarterly numbers", custom=True)
        session = await controller.confirm_round()

        assert session.phase is SessionPhase.MAX_ITERATIONS_REACHED
        assert session.current_text == final_result_reply["enhanced_prompt"]
        assert session.laziness_score == 9
        assert session.lazy_tweaks[0]["name"] == "Make it funnier"

        payload = _payload(mock_provider)
        assert payload["serializedAnswers"] == (
            "Question number 1?: Option A\n"
            "Question number 2?: Option B\n"
            "Question number 3?: Quarterly numbers"
        )
        assert payload["round"] == 1
        assert payload["totalRounds"] == 1

    @pytest.mark.asyncio
    async def test_question_failure_falls_back_to_defaults(self, controller, mock_provider):
        mock_provider.set_response("I'd rather chat")

        session = await controller.start("write email", SessionMode.GUIDED_FIVE_QUESTION)

        assert session.phase is SessionPhase.AWAITING_ANSWERS
        assert [q.key for q in session.questions][0] == "guided_goal"
        assert len(session.questions) == 5

    @pytest.mark.asyncio
    async def test_too_few_generated_questions_fall_back(self, controller, mock_provider):
        mock_provider.set_response({"questions": [{"question": "Only one?"}]})

        session = await controller.start("write email", SessionMode.GUIDED_FIVE_QUESTION)

        assert session.questions[0].key == "guided_goal"

    @pytest.mark.asyncio
    async def test_final_synthesis_failure_keeps_answers(self, controller, mock_provider,
                                                         guided_questions_reply):
        mock_provider.set_responses([guided_questions_reply, "not json"])
        await controller.start("write email", SessionMode.GUIDED_FIVE_QUESTION)
        for value in ("a", "b", "c"):
            await controller.submit_answer(value)

        with pytest.raises(ParseError):
            await controller.confirm_round()

        assert controller.session.phase is SessionPhase.AWAITING_ANSWERS
        assert controller.session.answered_count == 3
        assert controller.versions() == []


class TestTopic:
    @pytest.mark.asyncio
    async def test_preliminary_then_second_round(self, controller, mock_provider,
                                                 topic_questions_reply):
        second_round = {
            "questions": [
                {**q, "question": q["question"].replace("What", "And")}
                for q in topic_questions_reply["questions"]
            ]
        }
        mock_provider.set_responses([
            topic_questions_reply,
            {"enhanced_prompt": "Draft one", "laziness_score": 5, "prompt_quality": 6},
            second_round,
        ])

        session = await controller.start("write email", SessionMode.THREE_ROUND_TOPIC)
        assert [q.topic for q in session.questions] == [
            "goal", "role", "context", "output_format", "warning", "example"
        ]
        for _ in range(6):
            session = await controller.submit_answer("yes")

        assert session.phase is SessionPhase.PRELIMINARY_OFFERED
        assert session.current_text == "Draft one"

        session = await controller.continue_refinement()
        assert session.current_round == 2
        assert session.questions[0].key == "round2_goal"
        assert session.questions[0].prompt_text == "And about goal?"
        assert "goal: yes" in _payload(mock_provider)["serializedAnswers"]

    @pytest.mark.asyncio
    async def test_summary_lists_answers(self, controller, mock_provider,
                                         topic_questions_reply):
        mock_provider.set_response(topic_questions_reply)
        await controller.start("write email", SessionMode.THREE_ROUND_TOPIC)
        await controller.submit_answer("Persuade")
        await controller.submit_answer("Teacher")

        assert controller.summary() == "goal: Persuade\nrole: Teacher"


class TestIterative:
    @pytest.mark.asyncio
    async def test_analysis_then_improvement(self, controller, mock_provider, analysis_reply):
        mock_provider.set_responses([
            analysis_reply,
            {"improved_prompt": "Better email prompt", "changes_made": ["Added audience"]},
        ])

        session = await controller.start("write email", SessionMode.ITERATIVE_ANALYSIS)
        assert session.analysis == {"score": 42, "score_label": "Needs Work"}
        assert [q.kind for q in session.questions] == [QuestionKind.TEXTAREA, QuestionKind.SELECT]
        assert [o.text for o in session.questions[1].options] == ["Colleagues", "Clients", "Friends"]

        await controller.submit_answer("Announce the demo")
        session = await controller.submit_answer("Colleagues")

        assert session.phase is SessionPhase.RESULT_READY
        assert session.current_text == "Better email prompt"
        payload = _payload(mock_provider)
        assert payload["promptToImprove"] == "write email"
        assert payload["iteration"] == 1
        assert len(payload["questionsAndAnswers"]) == 2

    @pytest.mark.asyncio
    async def test_second_analysis_uses_improved_text(self, controller, mock_provider, analysis_reply):
        mock_provider.set_responses([
            analysis_reply,
            {"improved_prompt": "Better email prompt"},
            analysis_reply,
        ])
        await controller.start("write email", SessionMode.ITERATIVE_ANALYSIS)
        await controller.submit_answer("x")
        await controller.submit_answer("y")

        session = await controller.continue_refinement()

        assert session.current_round == 2
        assert _payload(mock_provider) == {
            "prompt": "Better email prompt", "language": "en", "iteration": 2,
        }

    @pytest.mark.asyncio
    async def test_second_iteration_sends_its_own_answers(self, controller, mock_provider, analysis_reply):
        mock_provider.set_responses([
            analysis_reply,
            {"improved_prompt": "Better v1"},
            analysis_reply,
            {"improved_prompt": "Better v2"},
        ])
        await controller.start("write email", SessionMode.ITERATIVE_ANALYSIS)
        await controller.submit_answer("first a")
        await controller.submit_answer("first b")
        await controller.continue_refinement()

        await controller.submit_answer("second a")
        session = await controller.submit_answer("second b")

        assert session.current_text == "Better v2"
        payload = _payload(mock_provider)
        assert payload["iteration"] == 2
        assert [qa["answer"] for qa in payload["questionsAndAnswers"]] == ["second a", "second b"]

    @pytest.mark.asyncio
    async def test_second_iteration_cannot_confirm_unanswered(self, controller, mock_provider, analysis_reply):
        mock_provider.set_responses([
            analysis_reply,
            {"improved_prompt": "Better v1"},
            analysis_reply,
        ])
        await controller.start("write email", SessionMode.ITERATIVE_ANALYSIS)
        await controller.submit_answer("first a")
        await controller.submit_answer("first b")
        await controller.continue_refinement()

        with pytest.raises(RoundIncompleteError):
            await controller.confirm_round()

        assert controller.session.phase is SessionPhase.AWAITING_ANSWERS
        assert controller.session.round_answered_count == 0

    @pytest.mark.asyncio
    async def test_improvement_keeps_changes_made(self, controller, mock_provider, analysis_reply):
        mock_provider.set_responses([
            analysis_reply,
            {"improved_prompt": "Better v1", "changes_made": ["Added audience", "Set tone"]},
            {"enhanced_prompt": "Shorter v1"},
        ])
        await controller.start("write email", SessionMode.ITERATIVE_ANALYSIS)
        await controller.submit_answer("x")
        session = await controller.submit_answer("y")

        assert session.changes_made == ["Added audience", "Set tone"]

        session = await controller.tweak("Make it shorter")
        assert session.changes_made == []


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_second_command_rejected_while_in_flight(self, limits):
        provider = BlockingProvider()
        provider.set_response({"generatedText": "done"})
        controller = PromptSessionController(GenerationClient(provider), limits=limits)

        task = asyncio.create_task(controller.start("write email", SessionMode.SUPER_LAZY))
        await _wait_for(provider.entered)

        assert controller.in_flight
        with pytest.raises(SynthesisInProgressError):
            await controller.tweak("shorter")

        provider.release.set()
        session = await task
        assert session.current_text == "done"
        assert not controller.in_flight

    @pytest.mark.asyncio
    async def test_reset_discards_late_result(self, limits):
        provider = BlockingProvider()
        provider.set_response({"generatedText": "too late"})
        controller = PromptSessionController(GenerationClient(provider), limits=limits)

        task = asyncio.create_task(controller.start("write email", SessionMode.SUPER_LAZY))
        await _wait_for(provider.entered)

        controller.reset()
        provider.release.set()
        session = await task

        assert session.phase is SessionPhase.IDLE
        assert controller.session.current_text is None
        assert controller.versions() == []
        assert len(controller.ledger) == 0
