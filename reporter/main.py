# reporter/main.py
"""Main entry point for the Crisp Bug Reporter."""
import asyncio
import logging
import signal
import sys

from aiohttp import web
from dotenv import load_dotenv

from reporter.config import Config
from reporter.handlers import CRISP_KEY, PIPELINE_KEY, bug_reporter, settings
from reporter.handlers.errors import json_error_middleware
from reporter.pipeline import BugPipeline
from reporter.services.crisp_client import CrispClient
from reporter.services.github_client import GitHubClient
from reporter.services.llm import LLMService
from reporter.services.notifier import Notifier

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


async def _health_handler(request: web.Request) -> web.Response:
    """Handle health check requests."""
    return web.json_response({"status": "healthy"})


async def _drain_notes(app: web.Application) -> None:
    await app[PIPELINE_KEY].notifier.drain()


async def _close_crisp(app: web.Application) -> None:
    await app[CRISP_KEY].close()


def create_app(crisp: CrispClient, pipeline: BugPipeline) -> web.Application:
    """Build the web application around already constructed services."""
    app = web.Application(middlewares=[json_error_middleware])
    app[CRISP_KEY] = crisp
    app[PIPELINE_KEY] = pipeline

    app.router.add_get("/health", _health_handler)
    bug_reporter.setup(app)
    settings.setup(app)

    app.on_shutdown.append(_drain_notes)
    app.on_cleanup.append(_close_crisp)
    return app


def build_pipeline(config: Config) -> tuple[CrispClient, BugPipeline]:
    """Create the API clients and the pipeline from configuration."""
    crisp = CrispClient(
        identifier=config.crisp_identifier,
        key=config.crisp_key,
        plugin_id=config.crisp_plugin_id,
        base_url=config.crisp_api_url,
        timeout=config.request_timeout,
    )
    llm = LLMService(
        provider=config.llm_provider,
        anthropic_api_key=config.anthropic_api_key or None,
        openai_api_key=config.openai_api_key or None,
        anthropic_model=config.anthropic_model,
        openai_model=config.openai_model,
        timeout=config.request_timeout,
    )
    github = GitHubClient(token=config.github_token, timeout=config.request_timeout)
    pipeline = BugPipeline(
        crisp=crisp,
        llm=llm,
        github=github,
        notifier=Notifier(crisp),
        default_repo=config.github_repo,
    )
    return crisp, pipeline


async def main() -> None:
    """Main entry point."""
    load_dotenv()
    config = Config()
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)
    crisp, pipeline = build_pipeline(config)
    app = create_app(crisp, pipeline)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, config.host, config.port)
    await site.start()
    logger.info(f"Crisp Bug Reporter listening on {config.host}:{config.port}")

    stop = asyncio.Event()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}, shutting down...")
        stop.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal, sig)

    try:
        await stop.wait()
    finally:
        await runner.cleanup()


if __name__ == "__main__":
    asyncio.run(main())
