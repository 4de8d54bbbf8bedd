from story_quiz.constants.quiz_constants import LOADING_MESSAGE_ID
from story_quiz.core.models import Direction, MessageDraft, MessageKind
from story_quiz.core.services.message_log import MessageLog


def test_append_assigns_increasing_ids():
    log = MessageLog()
    first = log.append("Hallo")
    second = log.append("Sport", direction=Direction.SENT)

    assert first.id < second.id
    assert [m.text for m in log.messages()] == ["Hallo", "Sport"]
    assert log.last().direction == Direction.SENT


def test_show_loading_keeps_a_single_placeholder():
    log = MessageLog()
    log.append("Hallo")
    log.show_loading("Lädt …")
    log.show_loading("Lädt noch …")

    loading = [m for m in log.messages() if m.id == LOADING_MESSAGE_ID]
    assert len(loading) == 1
    assert loading[0].text == "Lädt noch …"
    assert loading[0].kind == MessageKind.LOADING


def test_remove_loading_reports_whether_anything_was_removed():
    log = MessageLog()
    assert log.remove_loading() is False

    log.show_loading("Lädt …")
    assert log.remove_loading() is True
    assert not log.has_loading()


def test_replace_loading_publishes_once():
    log = MessageLog()
    log.show_loading("Lädt …")
    snapshots = []
    log.subscribe(snapshots.append)

    log.replace_loading([MessageDraft(text="A"), MessageDraft(text="B")])

    assert len(snapshots) == 1
    assert [m.text for m in snapshots[0]] == ["A", "B"]


def test_listeners_never_observe_loading_and_replacement_together():
    log = MessageLog()
    log.show_loading("Lädt …")
    seen = []
    log.subscribe(lambda messages: seen.append([m.id for m in messages]))

    log.replace_loading([MessageDraft(text="Geschichte", kind=MessageKind.STORY)])

    for ids in seen:
        assert not (LOADING_MESSAGE_ID in ids and len(ids) > 1)


def test_nested_batches_publish_at_outermost_exit():
    log = MessageLog()
    snapshots = []
    log.subscribe(snapshots.append)

    with log.batch():
        log.append("eins")
        with log.batch():
            log.append("zwei")
        assert snapshots == []
        log.append("drei")

    assert len(snapshots) == 1
    assert len(snapshots[0]) == 3


def test_clear_empties_the_log():
    log = MessageLog()
    log.append("Hallo")
    log.clear()

    assert len(log) == 0
    assert log.last() is None
