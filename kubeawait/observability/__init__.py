"""Observability helpers for kubeawait (structured logging)."""
