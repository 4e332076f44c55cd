# tests/test_parsing.py
import pytest

from sentiment_api.parsing import is_link, preprocess_tweets, remove_links


def test_link_is_removed_and_words_kept_in_order():
    assert preprocess_tweets(["check this out http://x.co"]) == ["check this out"]


def test_remove_links_returns_remaining_words():
    assert remove_links("go https://t.co/abc State www.psu.edu now") == ["go", "State", "now"]


@pytest.mark.parametrize(
    "word, expected",
    [
        ("http://x.co", True),
        ("HTTPS://T.CO/xyz", True),
        ("www.psu.edu", True),
        ("website", False),
        ("#PennState", False),
        ("@psu", False),
    ],
)
def test_is_link(word, expected):
    assert is_link(word) is expected


def test_preprocess_keeps_tweet_order_and_count():
    tweets = ["first http://a.co", "https://b.co", "third one"]

    assert preprocess_tweets(tweets) == ["first", "", "third one"]


def test_preprocess_does_not_modify_input():
    tweets = ["keep me http://a.co"]
    preprocess_tweets(tweets)
    assert tweets == ["keep me http://a.co"]


@pytest.mark.parametrize(
    "word, expected",
    [
        ("(http://x.co)", []),
        ("link:https://t.co/a", ["link:"]),
        ("pic.twitter.com/abc", []),
        ("https://t.co/a,", []),
    ],
)
def test_links_inside_punctuation_are_removed(word, expected):
    assert remove_links(word) == expected


def test_embedded_links_are_cleaned_from_tweets():
    tweets = ["see (http://x.co) and link:https://t.co/a pic.twitter.com/abc"]

    assert preprocess_tweets(tweets) == ["see and link:"]
