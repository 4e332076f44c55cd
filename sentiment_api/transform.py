"""Filters NLU annotations and reshapes them for the client."""

from typing import Iterable

from pydantic import BaseModel

from .analyzer import Annotation

RELEVANCE_THRESHOLD = 0.5


class KeywordScore(BaseModel):
    """Flat sentiment/emotion scores for one keyword or entity."""
    text: str
    sentiment: float
    sadness: float
    joy: float
    fear: float
    disgust: float
    anger: float


def is_relevant(annotation: Annotation) -> bool:
    return annotation.has_emotion and annotation.relevance >= RELEVANCE_THRESHOLD


def to_keyword_score(annotation: Annotation) -> KeywordScore:
    emotion = annotation.emotion
    return KeywordScore(
        text=annotation.text,
        sentiment=annotation.sentiment_score,
        sadness=emotion.sadness,
        joy=emotion.joy,
        fear=emotion.fear,
        disgust=emotion.disgust,
        anger=emotion.anger,
    )


def transform_annotations(
    keywords: Iterable[Annotation],
    entities: Iterable[Annotation],
) -> list[KeywordScore]:
    """Keep relevant annotations that carry emotion scores, keywords before entities."""
    kept_keywords = [to_keyword_score(k) for k in keywords if is_relevant(k)]
    kept_entities = [to_keyword_score(e) for e in entities if is_relevant(e)]
    return kept_keywords + kept_entities
