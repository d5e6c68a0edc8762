"""Command-line interface (`tz-sdk`). The console entrypoint is `tz_sdk.cli.main:main`."""

from .main import app

__all__ = ["app"]
