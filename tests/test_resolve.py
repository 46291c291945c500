import pytest

from ytr.errors import InvalidReference
from ytr.resolve import SHORT_ID_ALPHABET, assign_short_id, extract_video_id, looks_like_url
from ytr.rng import PythonRandom


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://www.youtube.com/watch?v=abc123", "abc123"),
        ("https://youtube.com/watch?v=abc123&t=42", "abc123"),
        ("https://m.youtube.com/watch?list=PL1&v=xyz789", "xyz789"),
        ("https://youtu.be/abc123", "abc123"),
        ("https://youtu.be/abc123?t=10", "abc123"),
        ("https://www.youtube.com/embed/abc123", "abc123"),
        ("https://www.youtube.com/shorts/abc123", "abc123"),
        ("  https://www.youtube.com/watch?v=abc123  ", "abc123"),
    ],
)
def test_extract_video_id(url: str, expected: str) -> None:
    assert extract_video_id(url) == expected


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/watch?v=abc123",
        "https://www.youtube.com/watch",
        "https://www.youtube.com/watch?v=",
        "https://www.youtube.com/channel/UC123",
        "https://youtu.be/",
        "not a url",
    ],
)
def test_extract_video_id_rejects_unknown_shapes(url: str) -> None:
    with pytest.raises(InvalidReference) as excinfo:
        extract_video_id(url)
    assert excinfo.value.url == url


def test_invalid_reference_is_value_error() -> None:
    with pytest.raises(ValueError):
        extract_video_id("https://vimeo.com/123")


def test_looks_like_url() -> None:
    assert looks_like_url("https://youtu.be/abc")
    assert looks_like_url("HTTP://youtu.be/abc")
    assert not looks_like_url("-x")
    assert not looks_like_url("youtu.be/abc")


def test_assign_short_id_redraws_on_collision(scripted_random) -> None:
    rng = scripted_random(codes=["aaaaaa", "bbbbbb", "cccccc"])
    code = assign_short_id({"aaaaaa", "bbbbbb"}, rng)
    assert code == "cccccc"
    assert rng.code_calls == 3


def test_assign_short_id_uses_alphabet_and_length() -> None:
    code = assign_short_id(set(), PythonRandom(seed=1), length=8)
    assert len(code) == 8
    assert set(code) <= set(SHORT_ID_ALPHABET)
