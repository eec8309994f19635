"""Building priors from configuration dictionaries."""

from __future__ import annotations

from dataclasses import dataclass
from inspect import signature
from typing import Any

from ._protocols import PriorConfigFactory, PriorFunction, PriorType
from .baath import BaathPriorConfig
from .factored import FactoredPriorConfig
from .flat import FlatPriorConfig

_CONFIG_FACTORIES: dict[PriorType, type[PriorConfigFactory]] = {
    PriorType.FLAT: FlatPriorConfig,
    PriorType.BAATH: BaathPriorConfig,
    PriorType.FACTORED: FactoredPriorConfig,
}


@dataclass
class PriorConfig:
    """Configuration selecting one prior and its hyperparameters.

    Parameters
    ----------
    prior : FlatPriorConfig | BaathPriorConfig | FactoredPriorConfig
        Configuration of the selected prior.

    Examples
    --------
    From a YAML file:

    .. code-block:: yaml

        type: baath
        n_mu: 30
        n_sd: 15
        theta_a: 15
        theta_b: 2

    Load and build:

    >>> with open("prior_config.yaml") as f:
    ...     config_dict = yaml.safe_load(f)
    >>> prior = PriorConfig.from_dict(config_dict).to_prior()
    """

    prior: PriorConfigFactory

    def __post_init__(self) -> None:
        """Validate the prior configuration."""
        try:
            PriorType(self.prior.type.lower())
        except ValueError as e:
            raise ValueError(f"Unknown prior type: {self.prior.type}") from e
        except AttributeError as e:
            raise AttributeError("Prior configuration missing a 'type'.") from e

    @property
    def type(self) -> PriorType:
        """Type of the configured prior."""
        return PriorType(self.prior.type)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> PriorConfig:
        """Build configuration from a dictionary (e.g., loaded from YAML).

        Parameters
        ----------
        config_dict : dict
            Dictionary with a 'type' key naming the prior. The remaining
            recognised keys are passed to that prior's configuration.
            Unknown keys are silently ignored.

        Returns
        -------
        PriorConfig
            Configuration instance ready to build a prior.
        """
        _config_dict = config_dict.copy()
        prior_type = _config_dict.pop("type", None)
        if prior_type is None:
            raise ValueError("Prior config must have a 'type' key.")

        try:
            prior_type = PriorType(str(prior_type).lower())
        except ValueError as e:
            raise ValueError(f"Unknown prior type: {prior_type}") from e

        factory_cls = _CONFIG_FACTORIES[prior_type]
        known_fields = _known_keys(factory_cls)
        kwargs = {k: v for k, v in _config_dict.items() if k in known_fields}
        return cls(prior=factory_cls(**kwargs))

    def to_prior(self) -> PriorFunction:
        """Build the configured prior function."""
        return self.prior.to_prior()


def _known_keys(factory_cls: type) -> set[str]:
    """Keyword arguments accepted by a prior configuration class."""
    return set(signature(factory_cls).parameters)
