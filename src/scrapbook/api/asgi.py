"""ASGI entrypoint for the scrapbook API."""

from scrapbook.api.app import create_app
from scrapbook.containers import build_container

app = create_app(build_container())
