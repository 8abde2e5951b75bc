"""
Result envelope returned inside every SplitSolution.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    One evaluated split.

    Attributes:
        params: SplitParams payload (statistic, daughter sizes, rule name)
        info: family, slot and the node summaries the rule was given
        timing: Timer.result() of the solver, or None
        backend_name: registered name of the rule that ran
        warnings: messages captured while the rule ran, plus empty-daughter
            notices
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        return any(substring in w for w in self.warnings)
