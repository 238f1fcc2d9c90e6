"""Entry point for `python -m kubeawait`.

Usage:
    python -m kubeawait Deployment my-app -f filter.yaml
    uv run python -m kubeawait Pod my-pod < filter.yaml
"""

from __future__ import annotations

from kubeawait.cli import cli

cli(prog_name="kubeawait")
