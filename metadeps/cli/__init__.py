"""metadeps command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``metadeps`` script).
"""

from metadeps.cli.main import cli

__all__ = ["cli"]
