import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from skeptique.classifier.heuristic_classifier import classify
from skeptique.feeds.base import BaseFeed
from skeptique.storage.cache import StoryCache
from skeptique.storage.models import (
    Article,
    BlindSpots,
    CombinedSummary,
    Story,
    StoryPayload,
    SynthesisResult,
)
from skeptique.summarizer.llm_synthesizer import OpenRouterSynthesizer
from skeptique.utils.fingerprint import fingerprint
from skeptique.utils.result import Err, Ok, Result

logger = logging.getLogger(__name__)

SEED_PLACEHOLDER_SUMMARY = "Not available"
SEARCH_PLACEHOLDER_SUMMARY = (
    "This topic was generated from a live search across multiple news outlets."
)


@dataclass(frozen=True)
class SeedTopic:
    """Tópico vindo de uma story seed (GET /stories/{id})."""
    story: Story

    @property
    def topic(self) -> str:
        return self.story.title

    def shell(self) -> Dict[str, Any]:
        base = self.story.model_dump(by_alias=True, exclude_unset=True)
        base["lastUpdated"] = "Just now"
        return base

    @property
    def placeholder_summary(self) -> str:
        return SEED_PLACEHOLDER_SUMMARY


@dataclass(frozen=True)
class QueryTopic:
    """Tópico de busca livre (GET /search/story?q=)."""
    query: str

    @property
    def topic(self) -> str:
        return self.query

    def shell(self) -> Dict[str, Any]:
        return {
            "id": f"search:{self.query}",
            "title": self.query,
            "tags": ["Search"],
            "lastUpdated": "Live",
        }

    @property
    def placeholder_summary(self) -> str:
        return SEARCH_PLACEHOLDER_SUMMARY


TopicSource = Union[SeedTopic, QueryTopic]


def apply_heuristic_labels(articles: List[Article]) -> None:
    for a in articles:
        # resumo vazio: classifica pelo título em vez de cair sempre em Neutral/Other
        labels = classify(a.summary or a.title)
        a.tone = labels.tone.value
        a.frame = labels.frame.value


def apply_labels(articles: List[Article], synthesis: Optional[SynthesisResult]) -> None:
    """Labels do LLM sobrescrevem os heurísticos quando o id bate."""
    if synthesis is None or not synthesis.labels:
        return
    by_id = {label.id: label for label in synthesis.labels}
    for a in articles:
        label = by_id.get(a.id)
        if label is None:
            continue
        # campo ausente no label mantém o heurístico
        a.tone = label.tone or a.tone
        a.frame = label.frame or a.frame


def build_payload(
    source: TopicSource,
    articles: List[Article],
    synthesis: Optional[SynthesisResult],
) -> StoryPayload:
    summary = synthesis.summary if synthesis else None
    data = source.shell()
    data.update(
        {
            "sourcesCount": len(articles),
            "sources": articles,
            "combinedSummary": CombinedSummary(
                content=(summary.content if summary else None) or source.placeholder_summary,
                one_sentence=(summary.one_sentence if summary else None) or None,
            ),
            "blindSpots": BlindSpots(items=synthesis.blind_spots if synthesis else []),
        }
    )
    return StoryPayload.model_validate(data)


class StoryTracker:
    """
    Orquestra fetch -> fingerprint -> cache -> heurística -> LLM -> merge -> cache.
    Usado pelos dois endpoints (story seed e busca).
    """

    def __init__(self, feed: BaseFeed, synthesizer: OpenRouterSynthesizer, cache: StoryCache):
        self.feed = feed
        self.synthesizer = synthesizer
        self.cache = cache

    def build(self, source: TopicSource) -> Result[StoryPayload]:
        fetched = self.feed.fetch(source.topic)
        if not fetched.is_ok:
            return fetched
        articles = fetched.value
        if not articles:
            return Err("no_articles")

        key = fingerprint(articles)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Cache hit for '%s' (%s)", source.topic, key[:10])
            return Ok(cached)

        apply_heuristic_labels(articles)

        synthesized = self.synthesizer.synthesize(source.topic, articles)
        synthesis = synthesized.unwrap_or(None)
        if synthesis is None:
            logger.info("Synthesis unavailable for '%s' (%s), using heuristic labels", source.topic, synthesized.reason)

        apply_labels(articles, synthesis)
        payload = build_payload(source, articles, synthesis)

        self.cache.set(key, payload)
        return Ok(payload)
