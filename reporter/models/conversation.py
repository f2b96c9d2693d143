"""Conversation data model as returned by the Crisp API."""
from dataclasses import dataclass, field
from typing import Any


def _section(data: Any, key: str) -> dict[str, Any] | None:
    """Return data[key] if it is a mapping, otherwise None."""
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return value if isinstance(value, dict) else None


def _text(data: dict[str, Any] | None, key: str) -> str | None:
    if data is None:
        return None
    value = data.get(key)
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class Message:
    """One transcript entry. Only "text" messages carry bug report signal."""

    type: str
    from_: str
    content: Any
    timestamp: int | float = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        return cls(
            type=str(data.get("type", "")),
            from_=str(data.get("from", "")),
            content=data.get("content", ""),
            timestamp=data.get("timestamp") or 0,
        )


@dataclass(frozen=True)
class SoftwareVersion:
    name: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class SystemInfo:
    os: SoftwareVersion | None = None
    browser: SoftwareVersion | None = None


@dataclass(frozen=True)
class Geolocation:
    country: str | None = None


@dataclass(frozen=True)
class DeviceInfo:
    capabilities: list[str] | None = None
    geolocation: Geolocation | None = None
    system: SystemInfo | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "DeviceInfo | None":
        if data is None:
            return None

        capabilities = data.get("capabilities")
        if isinstance(capabilities, list):
            capabilities = [str(c) for c in capabilities]
        else:
            capabilities = None

        geolocation = _section(data, "geolocation")
        system = _section(data, "system")
        os_data = _section(system, "os")
        browser_data = _section(system, "browser")

        return cls(
            capabilities=capabilities,
            geolocation=(
                Geolocation(country=_text(geolocation, "country"))
                if geolocation is not None else None
            ),
            system=SystemInfo(
                os=(
                    SoftwareVersion(_text(os_data, "name"), _text(os_data, "version"))
                    if os_data is not None else None
                ),
                browser=(
                    SoftwareVersion(_text(browser_data, "name"), _text(browser_data, "version"))
                    if browser_data is not None else None
                ),
            ) if system is not None else None,
        )


@dataclass(frozen=True)
class ConversationMeta:
    """Visitor and device side information. Any level may be missing."""

    email: str | None = None
    device: DeviceInfo | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ConversationMeta":
        if not isinstance(data, dict):
            return cls()
        return cls(
            email=_text(data, "email"),
            device=DeviceInfo.from_dict(_section(data, "device")),
        )


@dataclass(frozen=True)
class Conversation:
    """Messages and metadata for one Crisp session."""

    messages: list[Message] = field(default_factory=list)
    meta: ConversationMeta = field(default_factory=ConversationMeta)


@dataclass(frozen=True)
class UserContext:
    """Flattened, display-ready view of ConversationMeta."""

    email: str | None = None
    device: str | None = None
    browser: str | None = None
    os: str | None = None
    country: str | None = None
