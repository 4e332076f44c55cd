"""
Tweet Sentiment API - FastAPI Application

Main entry point for the web application.
Supports:
- Tweet search across a fixed set of terms
- NLU keyword/entity sentiment and emotion analysis
- Static files for the browser client
"""

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .analyzer import NluAnalyzer
from .config import (
    NLU_ENV_VARS,
    TWITTER_ENV_VARS,
    SearchSettings,
    Settings,
    load_server_settings,
    load_settings,
)
from .errors import ConfigurationError, SentimentApiError
from .parsing import preprocess_tweets
from .searcher import TwitterSearcher
from .transform import KeywordScore, transform_annotations

server_settings = load_server_settings()

# Configure logging
logging.basicConfig(
    level=server_settings.log_level,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("=" * 60)
    logger.info("TWEET SENTIMENT API - STARTING UP")
    logger.info("=" * 60)

    if getattr(app.state, "settings", None) is None:
        try:
            app.state.settings = load_settings()
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            raise

    settings: Settings = app.state.settings
    logger.info(f"Search terms: {', '.join(settings.search.terms)}")
    logger.info(f"Tweets per term: {settings.search.count}")
    logger.info(f"NLU URL: {settings.nlu.url}")
    logger.info(f"Static dir: {settings.server.static_dir}")
    logger.info("=" * 60)
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Tweet Sentiment API",
    description="Search tweets and score keyword sentiment and emotion",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response Models
class SentimentResponse(BaseModel):
    """Tweets that were analyzed and the scores found in them."""
    tweets: list[str]
    keywords: list[KeywordScore]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    twitter_configured: bool
    nlu_configured: bool
    search_terms: list[str]


# Dependencies
def get_settings(request: Request) -> Settings:
    """Settings loaded at startup, or loaded now if startup was skipped."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        settings = load_settings()
        request.app.state.settings = settings
    return settings


def get_search_settings(settings: Settings = Depends(get_settings)) -> SearchSettings:
    return settings.search


async def get_searcher(settings: Settings = Depends(get_settings)):
    async with TwitterSearcher(settings.twitter) as searcher:
        yield searcher


async def get_analyzer(settings: Settings = Depends(get_settings)):
    async with NluAnalyzer(settings.nlu, language=settings.search.lang) as analyzer:
        yield analyzer


# Error handlers
@app.exception_handler(SentimentApiError)
async def sentiment_error_handler(request: Request, exc: SentimentApiError) -> JSONResponse:
    """Map service errors to a JSON error body."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.status_code,
                "message": str(exc),
                "type": exc.error_type,
            }
        },
    )


# Endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Check application health and configuration."""
    twitter_configured = all(os.getenv(var) for var in TWITTER_ENV_VARS.values())
    nlu_configured = all(os.getenv(var) for var in NLU_ENV_VARS.values())
    settings = getattr(app.state, "settings", None)
    terms = settings.search.terms if settings else SearchSettings().terms
    return HealthResponse(
        status="healthy" if twitter_configured and nlu_configured else "degraded",
        twitter_configured=twitter_configured,
        nlu_configured=nlu_configured,
        search_terms=list(terms),
    )


@app.get("/api/sentiment", response_model=SentimentResponse)
async def get_sentiment(
    searcher: TwitterSearcher = Depends(get_searcher),
    analyzer: NluAnalyzer = Depends(get_analyzer),
    search: SearchSettings = Depends(get_search_settings),
):
    """
    Search tweets for the configured terms and score them.

    Returns the original tweet texts plus the keyword and entity scores that
    passed the relevance filter.
    """
    logger.info("GET /api/sentiment")

    # Step 1: Collect tweets
    tweets = await searcher.get_tweets(list(search.terms), search.count, lang=search.lang)
    original_texts = list(dict.fromkeys(t.text for t in tweets))
    logger.info(f"[Step 1] Got {len(original_texts)} unique tweets")

    if not original_texts:
        return SentimentResponse(tweets=[], keywords=[])

    # Step 2: Analyze the cleaned corpus
    corpus = "\n".join(preprocess_tweets(original_texts))
    analysis = await analyzer.analyze_text(corpus)

    # Step 3: Filter and reshape
    keywords = transform_annotations(analysis.keywords, analysis.entities)
    logger.info(f"[Step 3] {len(keywords)} keywords/entities passed the relevance filter")

    return SentimentResponse(tweets=original_texts, keywords=keywords)


def static_files(directory, html: bool = False) -> StaticFiles:
    """Serve `directory`, failing with a configuration error if it is missing."""
    if not os.path.isdir(directory):
        raise ConfigurationError(f"Static directory does not exist: {directory}")
    return StaticFiles(directory=directory, html=html)


# Static files, mounted last so API routes take precedence
app.mount("/css", static_files(server_settings.static_dir), name="css")
app.mount("/js", static_files(server_settings.js_dir), name="js")
app.mount("/", static_files(server_settings.static_dir, html=True), name="static")


def run():
    logger.info(f"App listening on port {server_settings.port}")
    uvicorn.run(app, host=server_settings.host, port=server_settings.port)


if __name__ == "__main__":
    run()
