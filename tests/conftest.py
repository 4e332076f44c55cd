# tests/conftest.py
from types import SimpleNamespace

import pytest
import tweepy

from sentiment_api.config import NluSettings, TwitterCredentials


class FakeTwitterClient:
    """Stands in for tweepy's AsyncClient, serving canned pages in order."""

    def __init__(self, pages=None, error=None):
        self.pages = list(pages or [])
        self.error = error
        self.calls = []

    async def search_recent_tweets(self, query, **params):
        self.calls.append({"query": query, **params})
        if self.error:
            raise self.error
        if not self.pages:
            return tweepy.Response(data=None, includes={}, errors=[], meta={"result_count": 0})
        return self.pages.pop(0)


def make_page(start_id, n, prefix="tweet", last=False):
    """A page of `n` tweets with descending ids starting at `start_id`."""
    data = [
        SimpleNamespace(id=start_id - i, text=f"{prefix} {start_id - i}")
        for i in range(n)
    ]
    meta = {"result_count": n}
    if not last:
        meta["next_token"] = "next"
    return tweepy.Response(data=data, includes={}, errors=[], meta=meta)


@pytest.fixture
def twitter_credentials():
    return TwitterCredentials(
        consumer_key="ck",
        consumer_secret="cs",
        access_token_key="at",
        access_token_secret="ats",
    )


@pytest.fixture
def nlu_settings():
    return NluSettings(api_key="nlu-key", url="https://nlu.example.test")


@pytest.fixture
def full_env():
    return {
        "TWITTER_CONSUMER_KEY": "ck",
        "TWITTER_CONSUMER_SECRET": "cs",
        "TWITTER_ACCESS_TOKEN_KEY": "at",
        "TWITTER_ACCESS_TOKEN_SECRET": "ats",
        "NLU_API_KEY": "nlu-key",
        "NLU_URL": "https://nlu.example.test/",
    }
