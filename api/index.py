"""Vercel serverless entrypoint; the package is installed from pyproject."""

from mama_chef.api.asgi import app

__all__ = ["app"]
