from __future__ import annotations

import argparse
import json
import os
import tempfile
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from reportlab.lib import colors  # noqa: E402
from reportlab.lib.pagesizes import letter  # noqa: E402
from reportlab.lib.styles import getSampleStyleSheet  # noqa: E402
from reportlab.lib.units import inch  # noqa: E402
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle  # noqa: E402

from .report import format_ci, format_pct  # noqa: E402


def _load_report(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _save_plot(fig, path: str) -> str:
    fig.tight_layout()
    fig.savefig(path, dpi=160)
    plt.close(fig)
    return path


def _plot_side_intervals(report: Dict[str, Any], out_path: str) -> Optional[str]:
    rows = [r for r in report.get("side_identity") or [] if r.get("attack") and r.get("defense")]
    if not rows:
        return None

    labels = [r.get("map_name") for r in rows]
    fig, ax = plt.subplots(figsize=(7, 3.5))
    for offset, side, color in ((-0.15, "attack", "#db5a2a"), (0.15, "defense", "#2a6fdb")):
        xs, means, lows, highs = [], [], [], []
        for idx, r in enumerate(rows):
            s = r[side]
            if s.get("ci_low") is None or s.get("ci_high") is None:
                continue
            xs.append(idx + offset)
            means.append(s["mean"])
            lows.append(s["mean"] - s["ci_low"])
            highs.append(s["ci_high"] - s["mean"])
        if xs:
            ax.errorbar(xs, means, yerr=[lows, highs], fmt="o", color=color, capsize=3, label=side)

    ax.axhline(0.5, color="gray", linewidth=0.8, linestyle="--")
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=30, ha="right", fontsize=8)
    ax.set_ylim(0, 1)
    ax.set_ylabel("Round win rate")
    ax.set_title("Side Win Rate by Map (80% credible interval)")
    ax.legend(loc="upper right", fontsize=8)
    return _save_plot(fig, out_path)


def _plot_closing_states(report: Dict[str, Any], out_path: str) -> Optional[str]:
    states = (report.get("closing_ability") or {}).get("predicted_states") or []
    states = [s for s in states if s.get("win_prob") is not None]
    if not states:
        return None
    labels = [s.get("label") for s in states]
    values = [float(s["win_prob"]) for s in states]
    fig, ax = plt.subplots(figsize=(5.5, 3.2))
    ax.bar(labels, values, color="#2f9e8f")
    ax.set_ylim(0, 1)
    ax.set_title("Predicted Map Win% by Score State")
    ax.set_ylabel("Win probability")
    return _save_plot(fig, out_path)


def _plot_dependence(report: Dict[str, Any], out_path: str) -> Optional[str]:
    rows = [r for r in report.get("player_dependence") or [] if r.get("dependence_index") is not None]
    if not rows:
        return None
    labels = [r.get("player_name") or r.get("player_id") for r in rows[:10]]
    values = [float(r["dependence_index"]) for r in rows[:10]]
    fig, ax = plt.subplots(figsize=(6.5, 3.5))
    ax.barh(labels[::-1], values[::-1], color="#7c4ab8")
    ax.axvline(0.0, color="gray", linewidth=0.8)
    ax.set_title("Player Dependence (win% lift above median K-D)")
    ax.set_xlabel("Lift")
    return _save_plot(fig, out_path)


def _styled_table(rows: List[List[str]], col_widths: List[float]) -> Table:
    table = Table(rows, colWidths=[w * inch for w in col_widths])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("FONT", (0, 0), (-1, -1), "Helvetica", 7),
            ]
        )
    )
    return table


def _side_table(report: Dict[str, Any]) -> Table:
    rows = [["Map", "Attack", "Attack CI", "Defense", "Defense CI", "P(Δ>)", "P(Δ<)", "Identity"]]
    for r in report.get("side_identity") or []:
        atk = r.get("attack") or {}
        dfn = r.get("defense") or {}
        rows.append(
            [
                r.get("map_name") or "-",
                f"{format_pct(atk.get('mean'))} ({atk.get('wins', 0)}/{atk.get('rounds', 0)})",
                format_ci(atk.get("ci_low"), atk.get("ci_high")),
                f"{format_pct(dfn.get('mean'))} ({dfn.get('wins', 0)}/{dfn.get('rounds', 0)})",
                format_ci(dfn.get("ci_low"), dfn.get("ci_high")),
                format_pct(r.get("prob_delta_gt")),
                format_pct(r.get("prob_delta_lt")),
                r.get("identity") or "N/A",
            ]
        )
    if len(rows) == 1:
        rows.append(["No data", "-", "-", "-", "-", "-", "-", "-"])
    return _styled_table(rows, [0.9, 0.9, 1.0, 0.9, 1.0, 0.6, 0.6, 0.9])


def _dependence_table(report: Dict[str, Any]) -> Table:
    rows = [["Player", "Win% (good)", "Good CI", "Win% (bad)", "Bad CI", "Dependence", "Impact"]]
    for r in report.get("player_dependence") or []:
        impact = r.get("impact_coef")
        rows.append(
            [
                r.get("player_name") or r.get("player_id") or "-",
                f"{format_pct(r.get('good_win_rate'))} ({r.get('good_samples', 0)})",
                format_ci(r.get("good_ci_low"), r.get("good_ci_high")),
                f"{format_pct(r.get('bad_win_rate'))} ({r.get('bad_samples', 0)})",
                format_ci(r.get("bad_ci_low"), r.get("bad_ci_high")),
                format_pct(r.get("dependence_index")),
                f"{impact:.3f}" if impact is not None else "N/A",
            ]
        )
    if len(rows) == 1:
        rows.append(["No data", "-", "-", "-", "-", "-", "-"])
    return _styled_table(rows, [1.1, 0.9, 1.1, 0.9, 1.1, 0.8, 0.7])


def build_pdf(report: Dict[str, Any], output_path: str) -> None:
    styles = getSampleStyleSheet()
    meta = report.get("meta") or {}
    insights = report.get("insights") or {}

    story: List[Any] = []
    story.append(Paragraph(escape(meta.get("title") or "Win Conditions"), styles["Title"]))
    story.append(
        Paragraph(
            f"Matches analyzed: <b>{meta.get('matches_analyzed', 0)}</b> • "
            f"Maps analyzed: <b>{meta.get('maps_analyzed', 0)}</b>",
            styles["BodyText"],
        )
    )
    story.append(Spacer(1, 0.2 * inch))

    story.append(Paragraph("Side-Half Identity", styles["Heading3"]))
    story.append(_side_table(report))
    for item in insights.get("side_identity") or []:
        story.append(Paragraph(escape(item), styles["BodyText"]))
    story.append(Spacer(1, 0.2 * inch))

    story.append(Paragraph("Closing Ability Under Pressure", styles["Heading3"]))
    story.append(Paragraph(escape(insights.get("closing_ability") or "-"), styles["BodyText"]))
    story.append(Spacer(1, 0.2 * inch))

    story.append(Paragraph("Player Outcome Dependence", styles["Heading3"]))
    story.append(_dependence_table(report))
    story.append(Paragraph(escape(insights.get("player_dependence") or "-"), styles["BodyText"]))
    story.append(Spacer(1, 0.2 * inch))

    with tempfile.TemporaryDirectory() as tmp:
        plots = [
            (
                "sides.png",
                _plot_side_intervals,
                "Side win rates: dots are posterior means, bars the 80% credible interval.",
            ),
            (
                "closing.png",
                _plot_closing_states,
                "Closing model: predicted map win probability from canonical late-map score states.",
            ),
            (
                "dependence.png",
                _plot_dependence,
                "Player dependence: team win% when the player is at/above vs below their median K-D.",
            ),
        ]
        for name, fn, caption in plots:
            path = os.path.join(tmp, name)
            img = fn(report, path)
            if img and os.path.exists(img):
                story.append(Paragraph(caption, styles["BodyText"]))
                story.append(Image(img, width=6.5 * inch, height=3.5 * inch))
                story.append(Spacer(1, 0.2 * inch))

        doc = SimpleDocTemplate(output_path, pagesize=letter)
        doc.build(story)


def main() -> None:
    parser = argparse.ArgumentParser(description="Render win-condition report JSON to PDF.")
    parser.add_argument("--input", required=True, help="Path to report.json")
    parser.add_argument("--output", required=True, help="Path to output PDF")
    args = parser.parse_args()
    build_pdf(_load_report(args.input), args.output)


if __name__ == "__main__":
    main()
