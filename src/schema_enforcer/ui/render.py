"""Output rendering abstraction for the schema-enforcer CLI.

File: src/schema_enforcer/ui/render.py

Purpose
- Provide a thin rendering layer for human-readable CLI output.
- Keep JSON output (``--json``) separate and deterministic.

Functional requirements
- Plain-text rendering must always work without external dependencies.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping
from typing import TextIO


class CLIRenderer:
    """Thin CLI output renderer producing deterministic plain text."""

    def __init__(self, *, stream: TextIO | None = None, verbose: bool = False) -> None:
        self.verbose = verbose
        self._stream = stream

    def _print(self, line: str = "") -> None:
        print(line, file=self._stream if self._stream is not None else sys.stdout)

    def kv(self, key: str, value: object) -> None:
        """Print a key: value pair."""

        self._print(f"{key}: {value}")

    def text(self, line: str) -> None:
        self._print(line)

    def ok(self, label: str) -> None:
        """Print a passing check."""

        self._print(f"  OK  {label}")

    def fail(self, label: str) -> None:
        """Print a failing check."""

        self._print(f"  FAIL  {label}")

    def table(self, rows: Mapping[str, object]) -> None:
        """Print aligned ``key  value`` rows."""

        if not rows:
            return
        width = max(len(key) for key in rows)
        for key, value in rows.items():
            self._print(f"  {key.ljust(width)}  {value}")


def emit_json(payload: Mapping[str, object], *, stream: TextIO | None = None) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False),
        file=stream if stream is not None else sys.stdout,
    )


def create_renderer(*, verbose: bool = False) -> CLIRenderer:
    """Create a CLI renderer with the given settings."""

    return CLIRenderer(verbose=verbose)


__all__ = ["CLIRenderer", "create_renderer", "emit_json"]
