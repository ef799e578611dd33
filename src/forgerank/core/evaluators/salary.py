"\"\"\"Compensation fit against the job budget.\"\"\""

from __future__ import annotations

from dataclasses import dataclass

from ...schemas import BudgetBand, CompFit, SalaryExpectation

MAX_PENALTY = 0.08


@dataclass
class SalaryConfig:
    """Configuration for compensation matching."""

    tolerance_ratio: float = 0.10
    slight_penalty: float = 0.02
    major_penalty: float = 0.08

    def __post_init__(self) -> None:
        if self.tolerance_ratio < 0:
            raise ValueError("tolerance_ratio must be non-negative")
        if not 0.0 <= self.slight_penalty <= self.major_penalty <= MAX_PENALTY:
            raise ValueError(f"penalties must satisfy 0 <= slight <= major <= {MAX_PENALTY}")


class CompensationFitAdjuster:
    """Compare a candidate's target with the budget band and nudge XS.

    Compensation is advisory: the adjustment only ever lowers XS by a small
    bounded amount and never touches the gate.
    """

    method = "salary"

    def __init__(self, *, config: SalaryConfig | None = None) -> None:
        self._config = config or SalaryConfig()

    def assess(
        self,
        expectation: SalaryExpectation | None,
        budget: BudgetBand | None,
    ) -> CompFit:
        target = self._candidate_target(expectation)
        budget_min = budget.min if budget else None
        budget_max = budget.max if budget else None
        currency = (budget.currency if budget else None) or (expectation.currency if expectation else None)

        if target is None:
            return self._unknown("No salary expectation provided", target, budget_min, budget_max, currency)
        if budget is None or (budget_min is None and budget_max is None):
            return self._unknown("No budget configured", target, budget_min, budget_max, currency)
        if self._currency_mismatch(expectation, budget):
            return self._unknown(
                f"Currency mismatch ({expectation.currency} vs {budget.currency})",
                target,
                budget_min,
                budget_max,
                currency,
            )

        if budget_min is not None and target < budget_min:
            return CompFit(
                status="below_budget",
                candidate_target=target,
                budget_min=budget_min,
                budget_max=budget_max,
                currency=currency,
                note="Expectation is below the budget range",
            )

        if not budget_max:
            # Without an upper bound there is nothing to exceed.
            return self._unknown("No budget ceiling to compare against", target, budget_min, budget_max, currency)

        if target <= budget_max:
            return CompFit(
                status="within_budget",
                candidate_target=target,
                budget_min=budget_min,
                budget_max=budget_max,
                currency=currency,
                note="Expectation is within budget",
            )

        overage = (target - budget_max) / budget_max
        if target <= budget_max * (1 + self._config.tolerance_ratio):
            status, adjustment = "slightly_above", -self._config.slight_penalty
        else:
            status, adjustment = "way_above", -self._config.major_penalty
        return CompFit(
            status=status,
            xs_adjustment=adjustment,
            candidate_target=target,
            budget_min=budget_min,
            budget_max=budget_max,
            currency=currency,
            overage_ratio=round(overage, 4),
            note=f"Expectation is {overage:.0%} above budget",
        )

    @staticmethod
    def apply(xs: float, fit: CompFit) -> float:
        return min(max(xs + fit.xs_adjustment, 0.0), 1.0)

    @staticmethod
    def _candidate_target(expectation: SalaryExpectation | None) -> float | None:
        if expectation is None:
            return None
        if expectation.target is not None:
            return expectation.target
        if expectation.min is not None and expectation.max is not None:
            return (expectation.min + expectation.max) / 2
        if expectation.min is not None:
            return expectation.min
        return expectation.max

    @staticmethod
    def _currency_mismatch(expectation: SalaryExpectation | None, budget: BudgetBand) -> bool:
        if expectation is None or not expectation.currency or not budget.currency:
            return False
        return expectation.currency.strip().upper() != budget.currency.strip().upper()

    @staticmethod
    def _unknown(
        note: str,
        target: float | None,
        budget_min: float | None,
        budget_max: float | None,
        currency: str | None,
    ) -> CompFit:
        return CompFit(
            status="unknown",
            candidate_target=target,
            budget_min=budget_min,
            budget_max=budget_max,
            currency=currency,
            note=note,
        )
