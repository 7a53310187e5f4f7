"""Utility modules for CompareAI."""

from compareai.utils.logging import RequestLogger, setup_logging
from compareai.utils.metrics import Metrics, metrics

__all__ = [
    "setup_logging",
    "RequestLogger",
    "metrics",
    "Metrics",
]
