import logging
import os
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter

from skeptique.storage.models import Article
from skeptique.utils.result import Err, Ok, Result
from .base import BaseFeed

logger = logging.getLogger(__name__)

# ---------- sessão HTTP com pool, sem retry (uma tentativa por request) ----------
_SESSION = requests.Session()
_ADAPTER = HTTPAdapter(pool_connections=10, pool_maxsize=20, max_retries=0)
_SESSION.mount("https://", _ADAPTER)
_SESSION.headers.update({"User-Agent": "Skeptique/1.0 (+https://localhost)"})


class NewsApiFeed(BaseFeed):
    BASE_URL = "https://newsapi.org/v2/everything"
    TIMEOUT = 15
    ID_PREFIX = "newsapi"

    def __init__(
        self,
        api_key: Optional[str],
        page_size: int = 8,
        language: str = "en",
        session: requests.Session = _SESSION,
    ):
        self.api_key = api_key
        self.page_size = page_size
        self.language = language
        self.session = session

    @classmethod
    def from_env(cls, page_size: int = 8) -> "NewsApiFeed":
        return cls(api_key=os.getenv("NEWS_API_KEY"), page_size=page_size)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def fetch(self, topic: str) -> Result[List[Article]]:
        if not self.enabled:
            logger.info("NEWS_API_KEY not set, skipping live fetch for '%s'", topic)
            return Err("missing_api_key")

        params = {
            "q": topic,
            "language": self.language,
            "sortBy": "relevancy",
            "pageSize": self.page_size,
            "apiKey": self.api_key,
        }
        try:
            response = self.session.get(self.BASE_URL, params=params, timeout=self.TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Fetch failed for '%s': %s", topic, e)
            return Err("transport_error", str(e))

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Invalid JSON from news API for '%s': %s", topic, e)
            return Err("bad_response", str(e))

        if not isinstance(payload, dict):
            return Err("bad_response", "payload is not an object")
        # NewsAPI devolve erros no corpo com status "error"
        if payload.get("status") == "error":
            logger.error("News API error for '%s': %s", topic, payload.get("message"))
            return Err("upstream_error", payload.get("message"))

        raw_articles = payload.get("articles") or []
        articles = [
            self._to_article(raw, i)
            for i, raw in enumerate(raw_articles[: self.page_size])
            if isinstance(raw, dict)
        ]
        logger.info("News API returned %d articles for '%s'", len(articles), topic)
        return Ok(articles)

    def _to_article(self, raw: Dict[str, Any], index: int) -> Article:
        # todo campo tem fallback: registro parcial nunca vira Article inválido
        source = raw.get("source") if isinstance(raw.get("source"), dict) else {}
        return Article(
            id=f"{self.ID_PREFIX}-{index}",
            source_name=_text(source.get("name")) or "Unknown",
            title=_text(raw.get("title")) or "Untitled",
            summary=_text(raw.get("description")) or _text(raw.get("content")) or "",
            url=_text(raw.get("url")) or None,
            image_url=_text(raw.get("urlToImage")) or None,
        )


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""
