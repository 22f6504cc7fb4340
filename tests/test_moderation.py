"""
tests/test_moderation.py
"""
import pytest

from notepool.models import normalize_tags
from notepool.moderation import secret_matches, word_count


@pytest.mark.parametrize(
    "text,expected",
    [
        ("", 0),
        (None, 0),
        ("   ", 0),
        ("one", 1),
        ("  two   words ", 2),
        ("tabs\tand\nnewlines  too", 4),
    ],
)
def test_word_count(text, expected):
    assert word_count(text) == expected


def test_secret_matches():
    assert secret_matches("s3cret", "s3cret")
    assert not secret_matches("s3cre", "s3cret")
    assert not secret_matches("S3CRET", "s3cret")
    assert not secret_matches("", "s3cret")


def test_unset_secret_never_matches():
    assert not secret_matches("", "")
    assert not secret_matches("anything", "")


def test_secret_matches_non_ascii():
    assert secret_matches("pässwörd", "pässwörd")
    assert not secret_matches("passwort", "pässwörd")


def test_normalize_tags():
    assert normalize_tags(None) == []
    assert normalize_tags("") == []
    assert normalize_tags("a, b ,a") == ["a", "b"]
    assert normalize_tags(["x", " ", "y", "x"]) == ["x", "y"]
    with pytest.raises(ValueError):
        normalize_tags({"not": "a list"})
