# reporter/handlers/bug_reporter.py
"""Create-bug endpoints: fetch-on-demand and embedded-messages adapters."""

import logging

from aiohttp import web

from reporter.handlers import PIPELINE_KEY
from reporter.handlers.errors import read_json
from reporter.models.bug_report import Issue
from reporter.models.request import EmbeddedRequest, PipelineRequest
from reporter.pipeline import Stage

logger = logging.getLogger(__name__)


def _respond(session_id: str, issue: Issue) -> web.Response:
    logger.info(f"[{session_id}] {Stage.RESPONDED.value}: {issue.url}")
    return web.json_response(issue.to_response())


async def create_bug(request: web.Request) -> web.Response:
    """File an issue for a conversation fetched from Crisp."""
    body = await read_json(request)
    pipeline_request = PipelineRequest.from_body(body)
    issue = await request.app[PIPELINE_KEY].run(pipeline_request)
    return _respond(pipeline_request.session_id, issue)


async def create_bug_from_messages(request: web.Request) -> web.Response:
    """File an issue for a conversation whose messages are in the request body."""
    body = await read_json(request)
    embedded = EmbeddedRequest.from_body(body)
    issue = await request.app[PIPELINE_KEY].run_with_messages(
        embedded.request, embedded.messages, embedded.meta
    )
    return _respond(embedded.request.session_id, issue)


def setup(app: web.Application) -> None:
    """Register the create-bug routes."""
    app.router.add_post("/api/create-bug", create_bug)
    app.router.add_post("/api/create-bug/embedded", create_bug_from_messages)
