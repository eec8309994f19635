"""Exact likelihood and grid posterior for Broman's socks."""

from .config import AnalysisConfig
from .likelihood import LikelihoodType, log_likelihood, log_likelihood_stopped
from .posterior import (
    DegeneratePosteriorError,
    GridConfigurationError,
    PosteriorTable,
    grid_posterior,
)

__all__ = [
    "AnalysisConfig",
    "DegeneratePosteriorError",
    "GridConfigurationError",
    "LikelihoodType",
    "PosteriorTable",
    "grid_posterior",
    "log_likelihood",
    "log_likelihood_stopped",
]
