"""Transform backend report format to frontend expected format."""

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _to_camel_case(snake_str: str) -> str:
    """Convert snake_case to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def _camelize(value: Any) -> Any:
    """Recursively camelCase dict keys; tuples become lists."""
    if isinstance(value, dict):
        return {
            (_to_camel_case(k) if isinstance(k, str) else k): _camelize(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_camelize(v) for v in value]
    return value


def _round_opt(value: float | None, digits: int = 4) -> float | None:
    return round(value, digits) if value is not None else None


def _summarize_model(model: Dict[str, Any] | None) -> Dict[str, Any] | None:
    if not model:
        return None
    names = list(model.get("feature_names") or [])
    coefficients = list(model.get("coefficients") or [])
    return {
        "intercept": _round_opt(coefficients[0]) if coefficients else None,
        "coefficients": {
            name: _round_opt(coef) for name, coef in zip(names, coefficients[1:])
        },
        "lambda": model.get("lam"),
        "iterations": model.get("iterations"),
        "converged": model.get("converged"),
    }


def transform_report_to_frontend(
    raw_report: Dict[str, Any],
    meta: Dict[str, Any],
) -> Dict[str, Any]:
    """Transform backend raw report to frontend expected format.

    Args:
        raw_report: Raw report from the wincon module
        meta: Request metadata

    Returns:
        Frontend-compatible win-condition report
    """
    report_meta = raw_report.get("meta", {})
    closing = dict(raw_report.get("closing_ability") or {})
    closing["model"] = _summarize_model(closing.get("model"))

    report_info = {
        "teamId": report_meta.get("team_id", meta.get("team_id", "unknown")),
        "teamName": report_meta.get("team_name", meta.get("team_name", "Unknown Team")),
        "title": report_meta.get("title"),
        "matchesAnalyzed": report_meta.get("matches_analyzed", 0),
        "matchesAvailable": meta.get("matches_available"),
        "mapsAnalyzed": report_meta.get("maps_analyzed", 0),
        "generatedAt": report_meta.get("generated_at"),
    }
    logger.debug("Transforming wincon report for %s", report_info["teamId"])

    return {
        "reportInfo": report_info,
        "filters": _camelize(raw_report.get("filters") or {}),
        "sideIdentity": _camelize(raw_report.get("side_identity") or []),
        # "model" is already in frontend shape; camelize the rest of the section only
        "closingAbility": {
            **_camelize({k: v for k, v in closing.items() if k != "model"}),
            "model": closing["model"],
        },
        "playerDependence": _camelize(raw_report.get("player_dependence") or []),
        "insights": _camelize(raw_report.get("insights") or {}),
    }
