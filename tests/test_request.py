# tests/test_request.py
import pytest

from reporter.exceptions import ValidationError
from reporter.models.request import EmbeddedRequest, PipelineRequest


def test_pipeline_request_from_body() -> None:
    request = PipelineRequest.from_body(
        {"session_id": " s1 ", "website_id": "w1", "github_repo": "acme/app"}
    )
    assert request == PipelineRequest(session_id="s1", website_id="w1", github_repo="acme/app")


def test_pipeline_request_blank_repo_is_unset() -> None:
    request = PipelineRequest.from_body({"session_id": "s1", "website_id": "w1", "github_repo": ""})
    assert request.github_repo is None


def test_pipeline_request_repo_must_be_string() -> None:
    with pytest.raises(ValidationError, match="github_repo"):
        PipelineRequest.from_body({"session_id": "s1", "website_id": "w1", "github_repo": 5})


def test_embedded_request_merges_top_level_device() -> None:
    embedded = EmbeddedRequest.from_body({
        "session_id": "s1",
        "website_id": "w1",
        "messages": [{"type": "text", "from": "user", "content": "hi", "timestamp": 1}],
        "meta": {"email": "jane@example.com"},
        "device": {"geolocation": {"country": "BR"}},
    })
    assert embedded.meta.email == "jane@example.com"
    assert embedded.meta.device is not None
    assert embedded.meta.device.geolocation is not None
    assert embedded.meta.device.geolocation.country == "BR"
    assert embedded.messages[0].content == "hi"


def test_embedded_request_meta_device_wins() -> None:
    embedded = EmbeddedRequest.from_body({
        "session_id": "s1",
        "website_id": "w1",
        "messages": [],
        "meta": {"device": {"geolocation": {"country": "PT"}}},
        "device": {"geolocation": {"country": "BR"}},
    })
    assert embedded.meta.device.geolocation.country == "PT"
    assert embedded.messages == []


def test_embedded_request_rejects_non_object_messages() -> None:
    with pytest.raises(ValidationError):
        EmbeddedRequest.from_body(
            {"session_id": "s1", "website_id": "w1", "messages": ["hello"]}
        )
