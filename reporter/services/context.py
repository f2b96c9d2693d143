# reporter/services/context.py
"""Build the user context table from conversation metadata."""

from reporter.models.conversation import ConversationMeta, SoftwareVersion, UserContext


def _describe(software: SoftwareVersion | None) -> str | None:
    """Join name and version, or None unless both are known."""
    if software is None or not software.name or not software.version:
        return None
    return f"{software.name} {software.version}"


def build_user_context(meta: ConversationMeta) -> UserContext:
    """
    Flatten conversation metadata into display fields.

    Never raises. A field whose source is missing at any level is None.

    Args:
        meta: Metadata of the conversation

    Returns:
        UserContext with email, device, browser, os and country
    """
    device = meta.device
    capabilities = device.capabilities if device else None
    geolocation = device.geolocation if device else None
    system = device.system if device else None

    return UserContext(
        email=meta.email or None,
        device=", ".join(capabilities) if capabilities else None,
        browser=_describe(system.browser if system else None),
        os=_describe(system.os if system else None),
        country=geolocation.country if geolocation and geolocation.country else None,
    )
