import json

import requests

from skeptique.summarizer.llm_synthesizer import DEFAULT_MODEL, OpenRouterSynthesizer
from conftest import FakeResponse, FakeSession, make_article

ARTICLES = [
    make_article(0, title="Rates held", source="Reuters", summary="Central bank holds"),
    make_article(1, title="Markets rally", source="AP"),
]

GOOD_JSON = {
    "summary": {"content": "Banks held rates.", "oneSentence": "Rates held."},
    "blindSpots": ["Renters", "Small business"],
    "labels": [{"id": "newsapi-1", "tone": "Optimistic", "frame": "Economic"}],
}


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _synth(payload=None, **kw):
    session = FakeSession(response=FakeResponse(payload, **kw))
    return OpenRouterSynthesizer(api_key="key", session=session), session


def test_prompt_lists_every_article():
    prompt = OpenRouterSynthesizer.build_prompt("interest rates", ARTICLES)
    assert 'Analyze reporting on "interest rates"' in prompt
    assert "Article 1 [id=newsapi-0] (Reuters): Rates held\nCentral bank holds" in prompt
    assert "Article 2 [id=newsapi-1] (AP): Markets rally\nNo summary" in prompt
    assert '"blindSpots"' in prompt


def test_request_shape():
    synth, session = _synth(_completion(json.dumps(GOOD_JSON)))
    synth.synthesize("rates", ARTICLES)
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == OpenRouterSynthesizer.BASE_URL
    assert kwargs["json"]["model"] == DEFAULT_MODEL
    assert kwargs["json"]["temperature"] == 0.2
    assert kwargs["json"]["messages"][0]["role"] == "user"
    assert kwargs["headers"]["Authorization"] == "Bearer key"


def test_parses_fenced_output():
    content = "Here you go:\n```json\n" + json.dumps(GOOD_JSON) + "\n```"
    synth, _ = _synth(_completion(content))
    result = synth.synthesize("rates", ARTICLES)
    assert result.is_ok
    assert result.value.summary.one_sentence == "Rates held."
    assert result.value.blind_spots == ["Renters", "Small business"]
    assert result.value.labels[0].tone == "Optimistic"


def test_content_as_list_of_parts():
    parts = [{"type": "text", "text": '{"blindSpots":'}, {"type": "text", "text": '["x"]}'}]
    synth, _ = _synth(_completion(parts))
    assert synth.synthesize("t", ARTICLES).value.blind_spots == ["x"]


def test_partial_object_is_valid():
    synth, _ = _synth(_completion('{"summary": {"content": "only this"}}'))
    result = synth.synthesize("t", ARTICLES).value
    assert result.summary.content == "only this"
    assert result.blind_spots == []
    assert result.labels == []


def test_null_lists_are_empty():
    synth, _ = _synth(_completion('{"blindSpots": null, "labels": null}'))
    result = synth.synthesize("t", ARTICLES).value
    assert result.blind_spots == []
    assert result.labels == []


def test_missing_key_makes_no_request():
    session = FakeSession()
    result = OpenRouterSynthesizer(api_key=None, session=session).synthesize("t", ARTICLES)
    assert result.reason == "missing_api_key"
    assert session.calls == []


def test_failure_reasons():
    cases = [
        (_completion(""), "empty_response"),
        ({"choices": []}, "empty_response"),
        (_completion("I cannot help with that."), "no_json"),
        (_completion('{"summary": {"content": "trunc'), "no_json"),
        (_completion('{"summary": "oops",}'), "malformed_json"),
        (_completion('{"blindSpots": "not a list"}'), "schema_mismatch"),
        (_completion('{"labels": [{"tone": "Neutral"}]}'), "schema_mismatch"),
    ]
    for payload, reason in cases:
        synth, _ = _synth(payload)
        result = synth.synthesize("t", ARTICLES)
        assert not result.is_ok, payload
        assert result.reason == reason, payload


def test_transport_and_http_errors():
    session = FakeSession(error=requests.Timeout("slow"))
    result = OpenRouterSynthesizer(api_key="k", session=session).synthesize("t", ARTICLES)
    assert result.reason == "transport_error"

    synth, _ = _synth({}, status_code=429)
    assert synth.synthesize("t", ARTICLES).reason == "transport_error"

    synth, _ = _synth(None, json_error=ValueError("not json"))
    assert synth.synthesize("t", ARTICLES).reason == "bad_response"
