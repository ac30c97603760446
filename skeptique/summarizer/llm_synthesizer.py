import logging
import os
from typing import Any, List, Optional

import requests
from pydantic import ValidationError

from skeptique.storage.models import Article, SynthesisResult
from skeptique.utils.result import Err, Ok, Result
from .json_extract import JsonExtractionError, extract_json_object

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "google/gemini-2.5-pro"
DEFAULT_TEMPERATURE = 0.2

PROMPT_TEMPLATE = """You are a media analyst.

Analyze reporting on "{topic}".

Return STRICT JSON ONLY. No commentary. No markdown.

Schema:
{{
  "summary": {{
    "content": "2-4 neutral sentences",
    "oneSentence": "Exactly one sentence"
  }},
  "blindSpots": ["item 1","item 2","item 3"],
  "labels": [
    {{"id":"{example_id}","tone":"Neutral","frame":"Political"}}
  ]
}}

Allowed tone values: Alarmist, Optimistic, Analytical, Neutral.
Allowed frame values: Political, Economic, Humanitarian, Security, Other.
Use the article ids exactly as given.

Articles:
{articles}
"""


class OpenRouterSynthesizer:
    """
    Síntese via LLM (OpenRouter chat completions): resumo combinado,
    blind spots e labels de tom/enquadramento por artigo.

    Nunca lança exceção: toda falha vira `Err(reason)` e o chamador decide
    o fallback (labels heurísticos + resumo padrão).
    """

    BASE_URL = "https://openrouter.ai/api/v1/chat/completions"
    TIMEOUT = 60

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        app_url: str = "http://localhost:5173",
        app_title: str = "Skeptique",
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.app_url = app_url
        self.app_title = app_title
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> "OpenRouterSynthesizer":
        return cls(
            api_key=os.getenv("OPENROUTER_API_KEY"),
            model=os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL),
            app_url=os.getenv("SKEPTIQUE_APP_URL", "http://localhost:5173"),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    # ---------- Prompt ----------
    @staticmethod
    def build_prompt(topic: str, articles: List[Article]) -> str:
        rendered = "\n\n".join(
            f"Article {i + 1} [id={a.id}] ({a.source_name}): {a.title}\n{a.summary or 'No summary'}"
            for i, a in enumerate(articles)
        )
        example_id = articles[0].id if articles else "newsapi-0"
        return PROMPT_TEMPLATE.format(topic=topic, example_id=example_id, articles=rendered)

    # ---------- Chamada HTTP ----------
    def complete(self, prompt: str) -> Result[str]:
        if not self.enabled:
            logger.info("OPENROUTER_API_KEY not set, skipping synthesis")
            return Err("missing_api_key")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.app_url,
            "X-Title": self.app_title,
        }
        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }
        try:
            response = self.session.post(self.BASE_URL, json=body, headers=headers, timeout=self.TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("LLM request failed: %s", e)
            return Err("transport_error", str(e))

        try:
            data = response.json()
        except ValueError as e:
            logger.error("LLM returned invalid JSON envelope: %s", e)
            return Err("bad_response", str(e))

        text = _message_text(data)
        if not text:
            logger.warning("LLM returned nothing")
            return Err("empty_response")
        return Ok(text)

    # ---------- Pipeline completo ----------
    def synthesize(self, topic: str, articles: List[Article]) -> Result[SynthesisResult]:
        completion = self.complete(self.build_prompt(topic, articles))
        if not completion.is_ok:
            return completion

        raw = completion.value
        logger.debug("Raw LLM output for '%s':\n%s", topic, raw)

        try:
            data = extract_json_object(raw)
        except JsonExtractionError as e:
            logger.warning("Could not extract JSON from LLM output (%s): %s", e.reason, e)
            return Err(e.reason, str(e))

        try:
            result = SynthesisResult.model_validate(data)
        except ValidationError as e:
            logger.warning("LLM JSON does not match schema: %s", e)
            return Err("schema_mismatch", str(e))

        logger.info(
            "Synthesis for '%s': %d blind spots, %d labels",
            topic, len(result.blind_spots), len(result.labels),
        )
        return Ok(result)


def _message_text(data: Any) -> Optional[str]:
    """content pode ser string ou lista de partes [{"text": ...}]."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(content, str):
        return content.strip() or None
    if isinstance(content, list):
        parts = [p.get("text", "") for p in content if isinstance(p, dict)]
        return " ".join(p for p in parts if p).strip() or None
    return None
