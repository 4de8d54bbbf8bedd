from conftest import DeferredTaskRunner, FakeStoryClient, make_story
from story_quiz.constants.message_constants import NETWORK_ERROR_MESSAGE, RESTART_PROMPT
from story_quiz.core.api_schemas import AnswerEvaluation, EvaluateAnswersResponse
from story_quiz.core.backend_client import NetworkFailure
from story_quiz.core.models import AnswerMode, Choice, ChoiceAnswer, MessageKind, Question, TextAnswer
from story_quiz.core.services.evaluation_dispatcher import EvaluationDispatcher, percentage

MC_QUESTIONS = (
    Question("Wer gewinnt?", (Choice("Anna", True), Choice("Ben"))),
    Question("Welche Farbe?", (Choice("Rot"), Choice("Blau", True))),
    Question("Wie weit?", (Choice("5 km", True), Choice("10 km"))),
)


def test_percentage_rounds_half_up():
    assert percentage(1, 2) == 50
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(1, 8) == 13
    assert percentage(0, 0) == 0


def test_multiple_choice_scores_locally():
    outcome = EvaluationDispatcher.score_multiple_choice(
        MC_QUESTIONS,
        (ChoiceAnswer(0), ChoiceAnswer(0), ChoiceAnswer(0)),
    )

    assert outcome.succeeded
    assert outcome.score == 67
    assert outcome.messages[0].text == "Ergebnis: 67% (2 von 3) richtig."
    assert "Rot" in outcome.messages[1].text and "Blau" in outcome.messages[1].text
    assert outcome.messages[-1].kind == MessageKind.RESTART_PROMPT
    assert len(outcome.messages) == 3


def test_question_without_choices_counts_as_incorrect():
    questions = (Question("Wer gewinnt?", (Choice("Anna", True), Choice("Ben"))), Question("Warum?"))

    outcome = EvaluationDispatcher.score_multiple_choice(questions, (ChoiceAnswer(0), TextAnswer("Weil")))

    assert outcome.score == 50


def test_multiple_choice_completes_without_the_runner():
    runner = DeferredTaskRunner()
    dispatcher = EvaluationDispatcher(FakeStoryClient(), runner)
    outcomes = []

    dispatcher.evaluate(
        AnswerMode.MULTIPLE_CHOICE,
        make_story(),
        MC_QUESTIONS,
        (ChoiceAnswer(0), ChoiceAnswer(1), ChoiceAnswer(0)),
        outcomes.append,
    )

    assert runner.pending == []
    assert outcomes[0].score == 100


def test_free_text_sends_question_answer_pairs():
    client = FakeStoryClient()
    client.evaluation = EvaluateAnswersResponse(
        overall_score=50.0,
        feedback="Gut gemacht.",
        evaluations=[
            AnswerEvaluation(question="Wer?", answer="Anna", is_correct=True),
            AnswerEvaluation(question="Warum?", answer="keine Ahnung", is_correct=False, correction="Weil sie trainiert."),
        ],
    )
    runner = DeferredTaskRunner()
    dispatcher = EvaluationDispatcher(client, runner)
    outcomes = []
    story = make_story()

    dispatcher.evaluate(
        AnswerMode.FREE_TEXT,
        story,
        (Question("Wer?"), Question("Warum?")),
        (TextAnswer("Anna"), TextAnswer("keine Ahnung")),
        outcomes.append,
    )
    assert outcomes == []
    runner.complete()

    assert client.evaluation_requests == [(story.story, [("Wer?", "Anna"), ("Warum?", "keine Ahnung")])]
    outcome = outcomes[0]
    assert outcome.succeeded
    assert outcome.score == 50
    texts = [draft.text for draft in outcome.messages]
    assert "Korrektur: Weil sie trainiert." in texts[1]
    assert texts[2].startswith("**Gesamtergebnis: 50%**")
    assert texts[-1] == RESTART_PROMPT


def test_free_text_failure_yields_a_single_error():
    client = FakeStoryClient()
    client.evaluation_error = NetworkFailure("timeout")
    runner = DeferredTaskRunner()
    outcomes = []

    EvaluationDispatcher(client, runner).evaluate(
        AnswerMode.FREE_TEXT,
        make_story(),
        (Question("Wer?"),),
        (TextAnswer("Anna"),),
        outcomes.append,
    )
    runner.complete()

    outcome = outcomes[0]
    assert not outcome.succeeded
    assert [draft.text for draft in outcome.messages] == [NETWORK_ERROR_MESSAGE]
    assert outcome.messages[0].kind == MessageKind.ERROR
