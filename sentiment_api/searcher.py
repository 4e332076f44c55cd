"""
Twitter Search Aggregator

Pages through the Twitter recent-search API for one or more terms and merges
the results into a single deduplicated list of tweets.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

import aiohttp
import tweepy
from tweepy.asynchronous import AsyncClient

from .config import TwitterCredentials
from .errors import SearchApiError

logger = logging.getLogger("searcher")

# Recent search only accepts page sizes in this range
MIN_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Tweet:
    """A single tweet as returned by search."""
    id: int
    text: str


@dataclass
class SearchQuery:
    """Query state for one search term, advanced after every page."""
    term: str
    count: int
    lang: str = "en"
    max_id: Optional[int] = None  # only fetch tweets with id <= max_id


@dataclass
class SearchPage:
    """One page of search results."""
    tweets: list[Tweet] = field(default_factory=list)
    exhausted: bool = False


def dedupe_by_text(tweets: Iterable[Tweet]) -> list[Tweet]:
    """Drop tweets whose text was already seen, keeping first occurrences in order."""
    seen = set()
    unique = []
    for tweet in tweets:
        if tweet.text in seen:
            continue
        seen.add(tweet.text)
        unique.append(tweet)
    return unique


class TwitterSearcher:
    """Searches Twitter with OAuth 1.0a user credentials."""

    def __init__(
        self,
        credentials: Optional[TwitterCredentials] = None,
        client: Optional[Any] = None,
        exclude_retweets: bool = True,
    ):
        if client is None and credentials is None:
            raise ValueError("TwitterSearcher needs either credentials or a client")
        self.credentials = credentials
        self.exclude_retweets = exclude_retweets
        self.client = client
        self._owns_client = client is None
        self.pages_fetched = 0

    async def __aenter__(self):
        if self.client is None:
            logger.info("Opening Twitter API client")
            self.client = AsyncClient(
                consumer_key=self.credentials.consumer_key,
                consumer_secret=self.credentials.consumer_secret,
                access_token=self.credentials.access_token_key,
                access_token_secret=self.credentials.access_token_secret,
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_client and self.client is not None:
            session = getattr(self.client, "session", None)
            if session is not None:
                logger.info("Closing Twitter API client")
                await session.close()
            self.client = None

    def _build_query(self, query: SearchQuery) -> str:
        parts = [query.term, f"lang:{query.lang}"]
        if self.exclude_retweets:
            parts.append("-is:retweet")
        return " ".join(parts)

    def _parse_response(self, response) -> SearchPage:
        data = response.data or []
        meta = response.meta or {}
        tweets = [Tweet(id=int(t.id), text=t.text) for t in data]
        # No next_token means this was the last page
        return SearchPage(tweets=tweets, exhausted=not meta.get("next_token"))

    async def search(self, query: SearchQuery) -> SearchPage:
        """Fetch a single page of results for the current query state."""
        if self.client is None:
            raise RuntimeError("Searcher must be used as async context manager")

        params = {
            "max_results": min(max(query.count, MIN_PAGE_SIZE), MAX_PAGE_SIZE),
            "user_auth": True,
        }
        if query.max_id is not None:
            # until_id is exclusive
            params["until_id"] = query.max_id + 1

        try:
            response = await self.client.search_recent_tweets(self._build_query(query), **params)
        except (tweepy.TweepyException, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Search failed for {query.term!r}: {e}")
            raise SearchApiError(f"Twitter search failed for {query.term!r}: {e}") from e

        self.pages_fetched += 1
        try:
            return self._parse_response(response)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SearchApiError(f"Malformed search response for {query.term!r}: {e}") from e

    async def search_set(self, queries: list[SearchQuery]) -> list[Tweet]:
        """
        Run one search per query concurrently and flatten the results.

        Results keep the order of `queries`. The first failure is raised.

        This is library API for batch single-page searches. The sentiment
        endpoint paginates per term through `get_tweets()` instead.
        """
        pages = await asyncio.gather(*(self.search(q) for q in queries))
        aggregated = []
        for page in pages:
            aggregated.extend(page.tweets)
        return aggregated

    async def _collect_term(self, term: str, count: int, lang: str) -> list[Tweet]:
        query = SearchQuery(term=term, count=count, lang=lang)
        tweets = []
        page_num = 0

        while query.count > 0:
            page_num += 1
            page = await self.search(query)

            if not page.tweets:
                logger.info(f"  [{term}] Page {page_num}: no results, stopping")
                break

            tweets.extend(page.tweets)
            query.count -= len(page.tweets)
            query.max_id = min(t.id for t in page.tweets) - 1

            logger.info(f"  [{term}] Page {page_num}: +{len(page.tweets)} tweets (total: {len(tweets)})")

            if page.exhausted:
                logger.info(f"  [{term}] No more pages")
                break

        return tweets

    async def get_tweets(
        self,
        terms: Union[str, list[str], tuple[str, ...]],
        count: int,
        lang: str = "en",
    ) -> list[Tweet]:
        """
        Collect up to roughly `count` tweets for each term.

        Each term is paged until `count` tweets have been received or the API
        runs dry. Results from all terms are concatenated and deduplicated by
        text.
        """
        if isinstance(terms, str):
            terms = [terms]

        logger.info(f"Searching {len(terms)} term(s), {count} tweets each")

        statuses = []
        for term in terms:
            statuses.extend(await self._collect_term(term, count, lang))

        unique = dedupe_by_text(statuses)
        logger.info(f"Collected {len(statuses)} tweets, {len(unique)} unique")
        return unique
