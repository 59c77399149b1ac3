"""ASGI entrypoint for the folk art platform API."""

from folk_art_platform.api.app import create_app
from folk_art_platform.containers import build_container

app = create_app(build_container())
