import pytest

from story_quiz.core.url_resolver import is_absolute_url, resolve_url


@pytest.mark.parametrize(
    "url",
    ["https://cdn.example.com/a.mp3", "http://x/y", "file:///tmp/a.wav", "blob:abc", "data:audio/wav;base64,AA"],
)
def test_absolute_urls_are_used_verbatim(url):
    assert is_absolute_url(url)
    assert resolve_url(url, "http://backend.test/api/") == url


def test_relative_urls_resolve_against_base():
    assert resolve_url("audio/r1.mp3", "http://backend.test/api/") == "http://backend.test/api/audio/r1.mp3"


def test_base_without_trailing_slash_is_treated_as_directory():
    assert resolve_url("audio/r1.mp3", "http://backend.test/api") == "http://backend.test/api/audio/r1.mp3"


def test_root_relative_urls_replace_the_path():
    assert resolve_url("/media/r1.mp3", "http://backend.test/api/") == "http://backend.test/media/r1.mp3"


@pytest.mark.parametrize("url", [None, "", "   "])
def test_missing_urls_resolve_to_none(url):
    assert resolve_url(url, "http://backend.test/") is None
