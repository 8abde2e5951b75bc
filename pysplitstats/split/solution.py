"""
Solution wrapper for split statistic results.

SplitSolution wraps a Result[SplitParams] and exposes user-friendly
properties with a summary() method.
"""

from __future__ import annotations

from pysplitstats.core.result import Result
from pysplitstats.split._common import SplitParams


class SplitSolution:
    """Evaluated candidate split."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[SplitParams]) -> None:
        self._result = _result

    @property
    def statistic(self) -> float:
        """Split quality; larger is better."""
        return self._result.params.statistic

    @property
    def family(self) -> str:
        return self._result.params.family

    @property
    def slot(self) -> int:
        return self._result.params.slot

    @property
    def rule_name(self) -> str:
        return self._result.params.rule_name

    @property
    def n_left(self) -> int:
        return self._result.params.n_left

    @property
    def n_right(self) -> int:
        return self._result.params.n_right

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_responses(self) -> int:
        return self._result.params.n_responses

    @property
    def extras(self):
        """Per-response statistics and other rule-specific outputs."""
        return self._result.params.extras

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def info(self):
        return self._result.info

    def summary(self) -> str:
        """Plain-text summary of the evaluated split."""
        lines = []
        lines.append(f"Call: split_statistic(family='{self.family}', slot={self.slot})")
        lines.append("")
        lines.append(f"  rule = {self.rule_name}")
        lines.append(
            f"  n={self.n_observations}, "
            f"left={self.n_left}, right={self.n_right}"
        )
        if self.n_responses > 1:
            lines.append(f"  responses = {self.n_responses}")
        lines.append(f"  statistic = {self.statistic:.6g}")

        per_response = (self.extras or {}).get("per_response")
        if per_response is not None:
            lines.append("")
            lines.append(f"  {'response':>8s}  {'rule':<32s}  {'statistic':>12s}")
            for j, (name, value) in enumerate(per_response):
                lines.append(f"  {j:>8d}  {name:<32s}  {value:12.6g}")

        if self.warnings:
            lines.append("")
            lines.append("Warnings:")
            for w in self.warnings:
                lines.append(f"  {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"SplitSolution(family='{self.family}', slot={self.slot}, "
            f"statistic={self.statistic:.6g}, "
            f"left={self.n_left}, right={self.n_right})"
        )
