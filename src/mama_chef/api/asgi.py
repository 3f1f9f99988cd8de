"""ASGI entrypoint for the Mama-Chef API."""

from mama_chef.api.app import create_app
from mama_chef.containers import build_container

app = create_app(build_container())
