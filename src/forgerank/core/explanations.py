"\"\"\"Human-readable explanation for a scored candidate.\"\"\""

from __future__ import annotations

from typing import Sequence

from ..schemas import CompFit, ContextBreakdown, Explanation, SkillBreakdown
from ..schemas.analysis import GateStatus


def build_explanation(
    *,
    name: str,
    capability_display: float,
    capability_required: float,
    context_score: float,
    forge_score: float,
    tau: float,
    gate_status: GateStatus,
    skills: Sequence[SkillBreakdown],
    context: ContextBreakdown,
    comp_fit: CompFit,
    velocity_bonus: float,
    warnings: Sequence[str],
) -> Explanation:
    summary = (
        f"CS {capability_display:.0%} (required {capability_required:.0%}), "
        f"XS {context_score:.0%}, FORGE {forge_score:.0%}"
    )

    strengths = [f"{skill.name}: {skill.reason}" for skill in skills if skill.status == "Proven"]
    for signal in context.signals():
        if signal.score >= 70:
            strengths.append(f"Strong {signal.name} signal ({signal.score:.0f}/100)")
    if velocity_bonus > 0:
        strengths.append(f"Learning velocity bonus +{velocity_bonus:.2f}")

    weaknesses: list[str] = []
    for skill in skills:
        if skill.status == "Missing":
            weaknesses.append(f"{skill.name}: no usable proof")
        elif skill.status == "Weak":
            weaknesses.append(f"{skill.name}: only weak proof ({skill.best_tier.value})")
    for signal in context.signals():
        if signal.score < 40:
            weaknesses.append(f"Low {signal.name} signal ({signal.score:.0f}/100)")

    flags: list[str] = []
    if gate_status != "ranked":
        flags.append(f"Required capability {capability_required:.0%} is below the gate threshold {tau:.0%}")
    missing_required = [skill.name for skill in skills if skill.is_required and skill.status == "Missing"]
    if missing_required:
        flags.append(f"Missing proof for required skills: {', '.join(missing_required)}")
    if comp_fit.status in ("slightly_above", "way_above"):
        flags.append(comp_fit.note)
    flags.extend(warnings)

    return Explanation(
        summary=summary,
        one_liner=_one_liner(name, gate_status, capability_required, tau, forge_score),
        strengths=strengths,
        weaknesses=weaknesses,
        flags=flags,
    )


def _one_liner(name: str, gate_status: GateStatus, required: float, tau: float, forge: float) -> str:
    if gate_status == "ranked":
        return f"{name} passes the capability gate ({required:.0%} >= {tau:.0%}) with FORGE {forge:.0%}"
    if gate_status == "review":
        return f"{name} has verified proof but falls short of the gate ({required:.0%} < {tau:.0%}); needs review"
    return f"{name} is filtered: required capability {required:.0%} is below {tau:.0%} with no verified proof"
