"""Configuration of a complete socks analysis."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from .likelihood import LikelihoodType, get_likelihood_function
from .posterior import PosteriorTable, grid_posterior
from .priors import PriorConfig


@dataclass
class AnalysisConfig:
    """Configuration for a grid posterior analysis.

    Parameters
    ----------
    p_max : int, optional
        Largest number of pairs on the grid. Default is 50.
    s_max : int, optional
        Largest number of singletons on the grid. Default is 50.
    k : int, optional
        Number of distinct socks observed. Default is 11.
    likelihood : str, optional
        "fixed" for a fixed sample of k socks, "stopped" if drawing stopped at
        the first match. Default is "fixed".
    prior : PriorConfig | None, optional
        Prior configuration. None selects the improper flat prior, which
        issues a warning when run.

    Examples
    --------
    >>> config = AnalysisConfig.from_dict(
    ...     {"k": 11, "prior": {"type": "baath", "n_mu": 30, "n_sd": 15}}
    ... )
    >>> table = config.run()
    """

    p_max: int = 50
    s_max: int = 50
    k: int = 11
    likelihood: str = LikelihoodType.FIXED
    prior: PriorConfig | None = None

    def __post_init__(self) -> None:
        """Validate the likelihood choice."""
        try:
            self.likelihood = LikelihoodType(str(self.likelihood).lower())
        except ValueError as e:
            raise ValueError(f"Unknown likelihood type: {self.likelihood}") from e

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> AnalysisConfig:
        """Build configuration from a dictionary (e.g., loaded from YAML).

        Parameters
        ----------
        config_dict : dict
            Dictionary of AnalysisConfig fields. 'prior', if present, is a
            dictionary understood by `PriorConfig.from_dict`.
            Unknown keys are silently ignored.

        Returns
        -------
        AnalysisConfig
            Configuration instance ready to run.
        """
        _config_dict = config_dict.copy()
        prior_dict = _config_dict.pop("prior", None)
        prior = PriorConfig.from_dict(prior_dict) if prior_dict is not None else None

        known_fields = {f.name for f in fields(cls) if f.name != "prior"}
        config_kwargs = {k: v for k, v in _config_dict.items() if k in known_fields}

        return cls(prior=prior, **config_kwargs)

    def run(self) -> PosteriorTable:
        """Compute the grid posterior described by this configuration."""
        prior_fn = self.prior.to_prior() if self.prior is not None else None
        return grid_posterior(
            self.p_max,
            self.s_max,
            self.k,
            log_likelihood_fn=get_likelihood_function(self.likelihood),
            log_prior_fn=prior_fn,
        )
