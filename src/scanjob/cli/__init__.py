"""Scanjob command line."""

from scanjob.cli.cli import app

__all__ = ["app"]
