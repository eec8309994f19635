"""Prior definitions."""

from ._protocols import CountPrior, PriorFunction, PriorType
from .baath import BaathPrior, BaathPriorConfig
from .config import PriorConfig
from .count import NegativeBinomialCountPrior
from .factored import FactoredPrior, FactoredPriorConfig
from .flat import FlatPrior, FlatPriorConfig

__all__ = [
    "BaathPrior",
    "BaathPriorConfig",
    "CountPrior",
    "FactoredPrior",
    "FactoredPriorConfig",
    "FlatPrior",
    "FlatPriorConfig",
    "NegativeBinomialCountPrior",
    "PriorConfig",
    "PriorFunction",
    "PriorType",
]
