# reporter/handlers/settings.py
"""Workspace settings endpoints, stored in Crisp plugin subscription settings."""

import logging

from aiohttp import web

from reporter.exceptions import ReporterError, ValidationError
from reporter.handlers import CRISP_KEY
from reporter.handlers.errors import read_json
from reporter.services.crisp_client import CrispAPIError
from reporter.services.github_client import parse_repository

logger = logging.getLogger(__name__)


async def get_settings(request: web.Request) -> web.Response:
    """Return the settings of a website, or empty settings if none can be read."""
    website_id = request.query.get("website_id", "").strip()
    if not website_id:
        raise ValidationError("Missing website_id")

    try:
        settings = await request.app[CRISP_KEY].get_settings(website_id)
    except CrispAPIError as e:
        logger.warning(f"Error getting settings for website {website_id}: {e}")
        settings = {}
    return web.json_response({"settings": settings})


async def save_settings(request: web.Request) -> web.Response:
    """Store the target repository of a website."""
    body = await read_json(request)
    website_id = body.get("website_id") if isinstance(body, dict) else None
    settings = body.get("settings") if isinstance(body, dict) else None
    github_repo = settings.get("github_repo") if isinstance(settings, dict) else None

    if not isinstance(website_id, str) or not website_id.strip():
        raise ValidationError("Missing required fields")
    if not isinstance(github_repo, str) or not github_repo.strip():
        raise ValidationError("Missing required fields")

    owner, name = parse_repository(github_repo.strip())
    try:
        await request.app[CRISP_KEY].save_settings(
            website_id.strip(), {"github_repo": f"{owner}/{name}"}
        )
    except CrispAPIError as e:
        logger.error(f"Error saving settings for website {website_id}: {e}")
        raise ReporterError(e.message) from e

    logger.info(f"Saved settings for website {website_id}: {owner}/{name}")
    return web.json_response({"success": True})


def setup(app: web.Application) -> None:
    """Register the settings routes."""
    app.router.add_get("/api/settings", get_settings)
    app.router.add_post("/api/settings", save_settings)
    app.router.add_put("/api/settings", save_settings)
