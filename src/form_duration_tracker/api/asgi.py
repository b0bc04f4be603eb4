"""ASGI entrypoint for the form duration tracker API."""

from form_duration_tracker.api.app import create_app
from form_duration_tracker.containers import build_container

app = create_app(build_container())
