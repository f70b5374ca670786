from __future__ import annotations

from typing import Any, Dict, List

from .report import format_ci, format_pct


def _identity_label(value: Any) -> str:
    return getattr(value, "value", value) or "N/A"


def render_text(report: Dict[str, Any]) -> str:
    meta = report.get("meta", {})
    filters = report.get("filters", {})
    side_rows = report.get("side_identity", [])
    closing = report.get("closing_ability", {})
    dependence = report.get("player_dependence", [])
    insights = report.get("insights", {})

    lines: List[str] = []
    lines.append("WIN CONDITION REPORT")
    lines.append(f"Team: {meta.get('team_name')} ({meta.get('team_id')})")
    lines.append(
        f"Window: {filters.get('window')} matches | Map: {filters.get('map') or 'all'} | "
        f"Side: {filters.get('side') or 'both'} | Maps analyzed: {meta.get('maps_analyzed', 0)}"
    )
    lines.append("")

    lines.append("Side-Half Identity")
    if not side_rows:
        lines.append("- No data")
    for row in side_rows:
        atk = row.get("attack", {})
        dfn = row.get("defense", {})
        lines.append(
            f"- {row.get('map_name')}: attack {format_pct(atk.get('mean'))} "
            f"({atk.get('wins', 0)}/{atk.get('rounds', 0)}) CI {format_ci(atk.get('ci_low'), atk.get('ci_high'))} | "
            f"defense {format_pct(dfn.get('mean'))} "
            f"({dfn.get('wins', 0)}/{dfn.get('rounds', 0)}) CI {format_ci(dfn.get('ci_low'), dfn.get('ci_high'))} | "
            f"P(Δ>) {format_pct(row.get('prob_delta_gt'))} P(Δ<) {format_pct(row.get('prob_delta_lt'))} | "
            f"{_identity_label(row.get('identity'))}"
        )
    lines.append("")

    lines.append("Closing Ability Under Pressure")
    lines.append(insights.get("closing_ability") or "")
    for state in closing.get("predicted_states") or []:
        lines.append(f"  {state.get('label')}: {format_pct(state.get('win_prob'))}")
    lines.append("")

    lines.append("Player Outcome Dependence")
    if not dependence:
        lines.append("- No data")
    for row in dependence:
        impact = row.get("impact_coef")
        lines.append(
            f"- {row.get('player_name')}: good {format_pct(row.get('good_win_rate'))} "
            f"({row.get('good_samples', 0)}) CI {format_ci(row.get('good_ci_low'), row.get('good_ci_high'))} | "
            f"bad {format_pct(row.get('bad_win_rate'))} "
            f"({row.get('bad_samples', 0)}) CI {format_ci(row.get('bad_ci_low'), row.get('bad_ci_high'))} | "
            f"dependence {format_pct(row.get('dependence_index'))} | "
            f"impact {f'{impact:.3f}' if impact is not None else 'N/A'}"
        )
    if insights.get("player_dependence"):
        lines.append(insights["player_dependence"])

    return "\n".join(lines)
