"""
NLU Sentiment Analyzer Module

Sends a block of text to a hosted NLU service (Watson NLU `/v1/analyze`
wire format) and parses the keyword and entity annotations it returns.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from .config import NluSettings
from .errors import AnalysisApiError

logger = logging.getLogger("analyzer")


@dataclass(frozen=True)
class Emotion:
    """Emotion scores for one annotation, each in [0, 1]."""
    sadness: float = 0.0
    joy: float = 0.0
    fear: float = 0.0
    disgust: float = 0.0
    anger: float = 0.0


@dataclass(frozen=True)
class Annotation:
    """A keyword or entity found in the analyzed text."""
    text: str
    relevance: float
    sentiment_score: float = 0.0
    emotion: Optional[Emotion] = None

    @property
    def has_emotion(self) -> bool:
        return self.emotion is not None


@dataclass
class NluAnalysis:
    """Result of one analyze call."""
    keywords: list[Annotation] = field(default_factory=list)
    entities: list[Annotation] = field(default_factory=list)
    language: str = ""


def _parse_emotion(raw: Any) -> Optional[Emotion]:
    if not raw:
        return None
    return Emotion(
        sadness=float(raw.get("sadness", 0.0)),
        joy=float(raw.get("joy", 0.0)),
        fear=float(raw.get("fear", 0.0)),
        disgust=float(raw.get("disgust", 0.0)),
        anger=float(raw.get("anger", 0.0)),
    )


def _parse_annotation(raw: Dict[str, Any]) -> Annotation:
    sentiment = raw.get("sentiment") or {}
    return Annotation(
        text=str(raw["text"]),
        relevance=float(raw.get("relevance", 0.0)),
        sentiment_score=float(sentiment.get("score", 0.0)),
        emotion=_parse_emotion(raw.get("emotion")),
    )


def parse_analysis(payload: Any) -> NluAnalysis:
    """
    Parse an analyze response body.

    Raises:
        AnalysisApiError: if the payload doesn't have the expected shape.
    """
    if not isinstance(payload, dict):
        raise AnalysisApiError(f"Expected a JSON object from NLU, got {type(payload).__name__}")

    try:
        return NluAnalysis(
            keywords=[_parse_annotation(k) for k in payload.get("keywords") or []],
            entities=[_parse_annotation(e) for e in payload.get("entities") or []],
            language=payload.get("language", ""),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise AnalysisApiError(f"Malformed NLU response: {e}") from e


class NluAnalyzer:
    """Analyzes text for keyword/entity sentiment and emotion."""

    FEATURE_LIMIT = 50

    def __init__(
        self,
        settings: NluSettings,
        language: str = "en",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not settings.api_key:
            raise ValueError("NLU api key not provided")
        self.settings = settings
        self.language = language
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        logger.info(f"Opening NLU client: {self.settings.url}")
        self.client = httpx.AsyncClient(
            timeout=self.settings.timeout_seconds,
            auth=("apikey", self.settings.api_key),
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            logger.info("Closing NLU client")
            await self.client.aclose()
            self.client = None

    def _build_request(self, text: str) -> Dict[str, Any]:
        target = {"emotion": True, "sentiment": True, "limit": self.FEATURE_LIMIT}
        return {
            "text": text,
            "language": self.language,
            "features": {
                "keywords": dict(target),
                "entities": dict(target),
            },
        }

    async def analyze_text(self, text: str) -> NluAnalysis:
        """
        Analyze a block of text in a single request.

        Raises:
            AnalysisApiError: on network errors, non-2xx responses or a body
                that isn't valid analysis JSON.
        """
        if self.client is None:
            raise RuntimeError("Analyzer must be used as async context manager")

        logger.info(f"Analyzing {len(text):,} chars of text")

        try:
            response = await self.client.post(
                f"{self.settings.url}/v1/analyze",
                params={"version": self.settings.version},
                json=self._build_request(text),
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"NLU returned HTTP {e.response.status_code}")
            raise AnalysisApiError(f"NLU request failed with HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"NLU request error: {e}")
            raise AnalysisApiError(f"NLU request failed: {e}") from e
        except ValueError as e:
            raise AnalysisApiError(f"NLU returned invalid JSON: {e}") from e

        analysis = parse_analysis(payload)
        logger.info(f"Analysis complete: {len(analysis.keywords)} keywords, {len(analysis.entities)} entities")
        return analysis

