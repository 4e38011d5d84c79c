"""Module entrypoint for ``python -m schema_enforcer``."""

from __future__ import annotations

from schema_enforcer.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
