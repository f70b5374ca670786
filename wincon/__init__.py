"""Win-condition inference engine for esports scouting reports."""

__all__ = [
    "config",
    "sampling",
    "posterior",
    "logistic",
    "normalize",
    "identity",
    "closing",
    "dependence",
    "report",
    "render",
    "report_pdf",
    "cli",
]
