"""
Registration surface for split statistics.

A tree grower asks for a statistic by family and slot number. Slot 1 of
each family holds the package's default rule; slot 2 of the regression
family holds the canonical-correlation divergence statistic. Further
rules can be registered in any free slot.

For multivariate responses the classification and regression rules are
looked up at the same slot, so a rule pair meant to be used together must
share a slot number.

Rules should be registered at import time; registration is not
synchronized with concurrent lookups.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pysplitstats.core.exceptions import UnknownSplitRuleError, ValidationError
from pysplitstats.split._cca import cca_split_statistic
from pysplitstats.split._classification import classification_split_statistic
from pysplitstats.split._common import (
    FAMILY_CLASSIFICATION,
    FAMILY_COMPETING_RISK,
    FAMILY_REGRESSION,
    FAMILY_SURVIVAL,
    VALID_FAMILIES,
    SplitStatistic,
)
from pysplitstats.split._competing import competing_risk_split_statistic
from pysplitstats.split._regression import regression_split_statistic
from pysplitstats.split._survival import survival_split_statistic


@dataclass(frozen=True)
class SplitRule:
    """A registered statistic.

    ``options`` names extra keyword arguments the function accepts beyond
    the fixed contract; solvers forward only those. ``requires`` lists the
    node data the rule reads ("response", "factor", "survival",
    "feature"), checked before the rule is called.
    """

    name: str
    family: str
    slot: int
    function: SplitStatistic
    options: tuple[str, ...] = field(default_factory=tuple)
    requires: tuple[str, ...] = field(default_factory=tuple)


_REGISTRY: dict[tuple[str, int], SplitRule] = {}

_FAMILY_REQUIREMENTS = {
    FAMILY_CLASSIFICATION: ("response", "factor"),
    FAMILY_REGRESSION: ("response",),
    FAMILY_SURVIVAL: ("survival",),
    FAMILY_COMPETING_RISK: ("survival",),
}


def register(
    function: SplitStatistic,
    family: str,
    slot: int,
    *,
    name: str | None = None,
    options: tuple[str, ...] = (),
    requires: tuple[str, ...] | None = None,
) -> SplitRule:
    """Register ``function`` as the statistic for (family, slot).

    An existing registration in the same slot is replaced. ``requires``
    defaults to what the family's built-in rule needs.

    Raises
    ------
    ValidationError
        If the family is unknown or the slot is not a positive integer.
    """
    if family not in VALID_FAMILIES:
        raise ValidationError(
            f"family must be one of {VALID_FAMILIES}, got '{family}'"
        )
    if isinstance(slot, bool) or not isinstance(slot, int) or slot < 1:
        raise ValidationError(f"slot must be a positive integer, got {slot!r}")

    rule = SplitRule(
        name=name if name is not None else function.__name__,
        family=family,
        slot=slot,
        function=function,
        options=tuple(options),
        requires=(
            _FAMILY_REQUIREMENTS[family] if requires is None else tuple(requires)
        ),
    )
    _REGISTRY[(family, slot)] = rule
    return rule


def get_split_rule(family: str, slot: int = 1) -> SplitRule:
    """Look up the rule registered for (family, slot).

    Raises
    ------
    UnknownSplitRuleError
        If nothing is registered there.
    """
    try:
        return _REGISTRY[(family, slot)]
    except KeyError:
        raise UnknownSplitRuleError(
            f"no split rule registered for family '{family}' in slot {slot}",
            family=family,
            slot=slot,
        ) from None


def unregister(family: str, slot: int) -> SplitRule:
    """Remove and return the rule in (family, slot)."""
    rule = get_split_rule(family, slot)
    del _REGISTRY[(family, slot)]
    return rule


def registered_rules() -> list[SplitRule]:
    """All registered rules ordered by family, then slot."""
    order = {family: i for i, family in enumerate(VALID_FAMILIES)}
    return sorted(
        _REGISTRY.values(),
        key=lambda rule: (order[rule.family], rule.slot),
    )


def register_default_rules() -> None:
    """(Re)install the package's built-in rules."""
    register(classification_split_statistic, FAMILY_CLASSIFICATION, 1)
    register(regression_split_statistic, FAMILY_REGRESSION, 1)
    register(survival_split_statistic, FAMILY_SURVIVAL, 1)
    register(competing_risk_split_statistic, FAMILY_COMPETING_RISK, 1)
    register(
        cca_split_statistic, FAMILY_REGRESSION, 2,
        options=("on_nonconvergence",),
        requires=("feature",),
    )


register_default_rules()
