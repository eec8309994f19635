"""Flat Prior."""

import numpy as np

from ._protocols import PriorType

IMPROPER_PRIOR_MESSAGE = (
    "Using a flat prior over (p, s). This prior is improper on the unbounded "
    "parameter space; the posterior is only normalisable because the grid is "
    "truncated, and it will change with the grid bounds."
)


class FlatPrior:
    """Class representing a constant log-prior over every (p, s).

    The prior is improper: it does not sum to a finite value over all
    non-negative (p, s). It only yields a proper posterior on a truncated grid
    and is meant for illustration.

    Parameters
    ----------
    log_value : float, optional
        Constant log-prior value. Default is 1.0. The value cancels on
        normalisation.

    Raises
    ------
    ValueError
        If `log_value` is not finite.
    """

    proper = False

    def __init__(self, log_value: float = 1.0) -> None:
        if not np.isfinite(log_value):
            raise ValueError("Flat prior log value must be finite.")
        self.log_value = float(log_value)

    def __call__(self, p: int, s: int) -> float:
        """Flat log-prior; -inf for negative counts."""
        if p < 0 or s < 0:
            return -np.inf
        return self.log_value

    def sample(self, num_samples: int, rng: np.random.Generator) -> np.ndarray:
        """An improper prior cannot be sampled.

        Raises
        ------
        ValueError
            Always.
        """
        raise ValueError("Cannot sample from an improper flat prior.")


class FlatPriorConfig:
    """Configuration for a flat prior."""

    type = PriorType.FLAT

    def __init__(self, log_value: float = 1.0) -> None:
        self.log_value = log_value

    def to_prior(self) -> FlatPrior:
        """Build a FlatPrior from this config."""
        return FlatPrior(log_value=self.log_value)
