"""Port (interface) for match data sources."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from wincon.normalize import MatchRecord, TeamRef


class MatchDataPort(ABC):
    """Port for loading normalized match records for a team."""

    @abstractmethod
    def load_team_matches(self, team_id: str) -> Tuple[TeamRef, List[MatchRecord]]:
        """Load a team's matches, most recent first.

        Args:
            team_id: Team identifier to analyze

        Returns:
            Tuple of (resolved team reference, match records)

        Raises:
            LookupError: If the team does not appear in the data source
            FileNotFoundError: If the data source is missing
        """
        ...
