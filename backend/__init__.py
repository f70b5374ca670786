"""WinCon Backend - Esports Win-Condition Scouting API.

This package provides a hexagonal architecture implementation around the
``wincon`` inference engine for Valorant team win-condition reports.

Layers:
- application: Use cases and port interfaces
- infrastructure: Adapters for match data sources and the report engine
- api: REST endpoints and response transformers
"""

__version__ = "1.0.0"
