import math

import pytest

from conftest import BASE_URL
from story_quiz.core.services.audio_playback import clamp_fraction


def test_load_resolves_relative_url_without_attaching(audio, media_backend):
    audio.load("audio/r1.mp3")

    assert audio.source_url == BASE_URL + "audio/r1.mp3"
    assert media_backend.source is None
    assert not audio.is_playing


def test_first_play_attaches_source_and_rate(audio, media_backend):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()

    assert media_backend.names() == ["set_source", "set_source", "set_playback_rate", "play"]
    assert media_backend.source == BASE_URL + "audio/r1.mp3"
    assert audio.is_playing


def test_toggle_pauses_when_playing(audio, media_backend):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()
    audio.toggle_playback()

    assert media_backend.names()[-1] == "pause"
    assert not audio.is_playing


def test_toggle_without_source_is_ignored(audio, media_backend):
    audio.toggle_playback()

    assert "play" not in media_backend.names()


def test_rejected_playback_leaves_player_paused(audio, media_backend):
    media_backend.fail_play = True
    audio.load("audio/r1.mp3")

    audio.toggle_playback()

    assert not audio.is_playing


def test_progress_is_none_until_duration_is_known(audio):
    audio.load("audio/r1.mp3")
    assert audio.progress() is None

    audio.handle_duration_changed(math.nan)
    assert audio.progress() is None

    audio.handle_duration_changed(0)
    assert audio.progress() is None

    audio.handle_duration_changed(40.0)
    assert audio.progress() == 0.0


def test_seek_before_duration_is_a_no_op(audio, media_backend):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()

    audio.seek_to(0.5)

    assert audio.position == 0.0
    assert "set_position" not in media_backend.names()


@pytest.mark.parametrize("fraction, expected", [(-0.5, 0.0), (0.25, 0.25), (1.7, 1.0), (math.nan, 0.0)])
def test_clamp_fraction(fraction, expected):
    assert clamp_fraction(fraction) == expected


def test_seek_clamps_and_updates_position(audio, media_backend):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()
    audio.handle_duration_changed(40.0)
    progress = []
    audio.subscribe_progress(progress.append)

    audio.seek_to(1.5)

    assert audio.position == 40.0
    assert ("set_position", 40.0) in media_backend.calls
    assert progress == [1.0]


def test_click_track_seeks_by_offset(audio):
    audio.load("audio/r1.mp3")
    audio.handle_duration_changed(100.0)

    audio.click_track(50, 200)

    assert audio.position == 25.0


def test_drag_seeks_continuously_and_suppresses_clicks(audio):
    audio.load("audio/r1.mp3")
    audio.handle_duration_changed(100.0)

    audio.begin_drag(20, 200)
    audio.drag_to(100, 200)
    audio.click_track(200, 200)
    assert audio.position == 50.0
    assert audio.is_dragging

    audio.end_drag(150, 200)
    assert audio.position == 75.0
    assert not audio.is_dragging


def test_position_events_are_ignored_while_dragging(audio):
    audio.load("audio/r1.mp3")
    audio.handle_duration_changed(100.0)
    audio.begin_drag(100, 200)

    audio.handle_position_changed(10.0)

    assert audio.position == 50.0


def test_set_rate_rejects_unknown_rates(audio):
    with pytest.raises(ValueError):
        audio.set_rate(3.0)


def test_rate_applies_to_attached_source_and_resets_on_load(audio, media_backend):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()

    audio.set_rate(1.5)
    assert ("set_playback_rate", 1.5) in media_backend.calls

    audio.load("audio/r2.mp3")
    assert audio.rate == 1.0
    assert audio.position == 0.0
    assert audio.duration is None


def test_rate_menu_select_sets_rate_and_closes(audio):
    audio.rate_menu.open()
    assert audio.rate_menu.is_open

    audio.rate_menu.select(0.75)

    assert audio.rate == 0.75
    assert not audio.rate_menu.is_open


def test_rate_menu_toggle_notifies_listeners(audio):
    states = []
    audio.rate_menu.subscribe(states.append)

    audio.rate_menu.toggle()
    audio.rate_menu.toggle()
    audio.rate_menu.close()

    assert states == [True, False]


def test_events_from_replaced_source_are_dropped(audio):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()
    old_source = audio.source_url
    audio.load("audio/r2.mp3")
    audio.toggle_playback()

    audio.handle_duration_changed(99.0, source=old_source)
    audio.handle_playback_ended(source=old_source)

    assert audio.duration is None
    assert audio.is_playing


def test_playback_end_stops_at_duration(audio):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()
    audio.handle_duration_changed(30.0, source=audio.source_url)

    audio.handle_playback_ended(source=audio.source_url)

    assert not audio.is_playing
    assert audio.progress() == 1.0


def test_playback_error_stops_playing(audio):
    audio.load("audio/r1.mp3")
    audio.toggle_playback()

    audio.handle_playback_error("decoder failed")

    assert not audio.is_playing
