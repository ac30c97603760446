# skeptique/tests/conftest.py
import pytest
import requests

from skeptique.storage.models import Article, SynthesisResult
from skeptique.utils.result import Err, Ok


def make_article(i, title=None, source="Reuters", summary=""):
    return Article(
        id=f"newsapi-{i}",
        source_name=source,
        title=title or f"Title {i}",
        summary=summary,
        url=f"https://example.com/{i}",
    )


class FakeFeed:
    """Feed determinístico; `articles=None` simula falha/sem chave."""
    def __init__(self, articles=None, reason="missing_api_key"):
        self.articles = articles
        self.reason = reason
        self.calls = []

    def fetch(self, topic):
        self.calls.append(topic)
        if self.articles is None:
            return Err(self.reason)
        # cópias novas a cada fetch, como o cliente real
        return Ok([a.model_copy() for a in self.articles])


class FakeSynthesizer:
    def __init__(self, result=None, reason="missing_api_key"):
        self.result = result
        self.reason = reason
        self.calls = []

    def synthesize(self, topic, articles):
        self.calls.append((topic, [a.id for a in articles]))
        if self.result is None:
            return Err(self.reason)
        return Ok(SynthesisResult.model_validate(self.result))


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self._payload = payload
        self.status_code = status_code
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=None)

    def json(self):
        if self._json_error:
            raise self._json_error
        return self._payload


class FakeSession:
    """Registra chamadas e devolve respostas pré-definidas (ou lança)."""
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _do(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._do("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._do("POST", url, **kwargs)


@pytest.fixture()
def api_main(monkeypatch):
    from skeptique.api import main as api_main
    # Sem network: feed e síntese falsos, cache limpo
    monkeypatch.setattr(api_main.tracker, "feed", FakeFeed(), raising=True)
    monkeypatch.setattr(api_main.tracker, "synthesizer", FakeSynthesizer(), raising=True)
    api_main.cache.clear()
    yield api_main
    api_main.cache.clear()


@pytest.fixture()
def client(api_main):
    from fastapi.testclient import TestClient
    with TestClient(api_main.app) as c:
        yield c
