"""
Split statistics for decision-tree induction.

Public API:
    split_statistic(membership, family=..., ...) -> SplitSolution
    multivariate_split_statistic(membership, responses, ...) -> SplitSolution

Fixed-contract statistics (for direct use by a tree grower):
    regression_split_statistic, classification_split_statistic,
    survival_split_statistic, competing_risk_split_statistic,
    cca_split_statistic

Registration:
    register, get_split_rule, registered_rules
"""

from pysplitstats.split._common import (
    LEFT,
    RIGHT,
    CanonicalCorrelation,
    CompetingRiskTables,
    RiskSetTables,
    SplitParams,
)
from pysplitstats.split._riskset import (
    accumulate_competing_risk_sets,
    accumulate_risk_sets,
)
from pysplitstats.split._regression import regression_split_statistic
from pysplitstats.split._classification import classification_split_statistic
from pysplitstats.split._survival import survival_split_statistic
from pysplitstats.split._competing import competing_risk_split_statistic
from pysplitstats.split._cca import (
    canonical_correlation,
    cca_split_statistic,
    pack_cca_features,
)
from pysplitstats.split.registry import (
    SplitRule,
    get_split_rule,
    register,
    registered_rules,
    unregister,
)
from pysplitstats.split.design import SplitDesign
from pysplitstats.split.solvers import (
    multivariate_split_statistic,
    split_statistic,
)
from pysplitstats.split.solution import SplitSolution

__all__ = [
    "LEFT",
    "RIGHT",
    "CanonicalCorrelation",
    "CompetingRiskTables",
    "RiskSetTables",
    "SplitParams",
    "accumulate_risk_sets",
    "accumulate_competing_risk_sets",
    "regression_split_statistic",
    "classification_split_statistic",
    "survival_split_statistic",
    "competing_risk_split_statistic",
    "cca_split_statistic",
    "canonical_correlation",
    "pack_cca_features",
    "SplitRule",
    "register",
    "unregister",
    "get_split_rule",
    "registered_rules",
    "SplitDesign",
    "split_statistic",
    "multivariate_split_statistic",
    "SplitSolution",
]
