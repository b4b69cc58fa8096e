"""Main entrypoint exposing the command-line application."""

from __future__ import annotations

from tozulip.apps.cli.app import main

if __name__ == "__main__":
    main()
