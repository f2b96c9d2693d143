"""
HTTP handlers package.

Each handler module defines a setup(app) function that registers its routes.
Services are shared with handlers through the application keys below.
"""
from aiohttp import web

from reporter.pipeline import BugPipeline
from reporter.services.crisp_client import CrispClient

PIPELINE_KEY = web.AppKey("pipeline", BugPipeline)
CRISP_KEY = web.AppKey("crisp", CrispClient)
