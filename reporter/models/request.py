"""Inbound request model for the create-bug endpoints."""
from dataclasses import dataclass
from typing import Any

from reporter.exceptions import ValidationError
from reporter.models.conversation import ConversationMeta, Message


def _required_str(body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required field: {key}")
    return value.strip()


def _optional_str(body: dict[str, Any], key: str) -> str | None:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Field {key} must be a string")
    return value.strip() or None


@dataclass(frozen=True)
class PipelineRequest:
    """Identifies the conversation to report and, optionally, the target repository."""

    session_id: str
    website_id: str
    github_repo: str | None = None

    @classmethod
    def from_body(cls, body: Any) -> "PipelineRequest":
        """
        Validate a fetch-on-demand request body.

        Raises:
            ValidationError: If session_id or website_id is missing
        """
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return cls(
            session_id=_required_str(body, "session_id"),
            website_id=_required_str(body, "website_id"),
            github_repo=_optional_str(body, "github_repo"),
        )


@dataclass(frozen=True)
class EmbeddedRequest:
    """A request that carries the transcript and metadata inline."""

    request: PipelineRequest
    messages: list[Message]
    meta: ConversationMeta

    @classmethod
    def from_body(cls, body: Any) -> "EmbeddedRequest":
        """
        Validate an embedded-messages request body.

        A top-level "device" record is accepted as a sibling of "meta".

        Raises:
            ValidationError: If identifiers or the message list are missing
        """
        request = PipelineRequest.from_body(body)

        raw_messages = body.get("messages")
        if not isinstance(raw_messages, list):
            raise ValidationError("Missing required field: messages")
        if not all(isinstance(m, dict) for m in raw_messages):
            raise ValidationError("Every message must be a JSON object")

        raw_meta = body.get("meta")
        meta_data = dict(raw_meta) if isinstance(raw_meta, dict) else {}
        if "device" not in meta_data and isinstance(body.get("device"), dict):
            meta_data["device"] = body["device"]

        return cls(
            request=request,
            messages=[Message.from_dict(m) for m in raw_messages],
            meta=ConversationMeta.from_dict(meta_data),
        )
