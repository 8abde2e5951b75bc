"""
pysplitstats: split quality statistics for decision-tree induction.

Scores a candidate LEFT/RIGHT partition of a node for regression,
classification, survival and competing-risk responses, plus a
canonical-correlation divergence statistic over paired variable blocks.

Submodules:
    core: exceptions, validation, result envelope, LAPACK wrappers
    split: statistics, registry, public solvers
"""

__version__ = "0.1.0"

from pysplitstats import split
from pysplitstats.split import (
    LEFT,
    RIGHT,
    multivariate_split_statistic,
    split_statistic,
)

__all__ = [
    "__version__",
    "split",
    "LEFT",
    "RIGHT",
    "split_statistic",
    "multivariate_split_statistic",
]
