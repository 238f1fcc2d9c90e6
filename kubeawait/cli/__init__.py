"""kubeawait command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``kubeawait`` script).
"""

from kubeawait.cli.main import cli

__all__ = ["cli"]
