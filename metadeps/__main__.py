"""Entry point for `python -m metadeps`.

Usage:
    python -m metadeps graph --format dot
    python -m metadeps graph --seed 00N5g00000AbCdE --format json
"""

from __future__ import annotations

from metadeps.cli import cli

cli()
