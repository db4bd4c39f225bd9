"""
Domain errors raised by the league core.

Routes translate these into HTTP responses; the registration manager returns
them inside a RegistrationResult instead of raising.
"""

from typing import Optional


class LeagueError(Exception):
    """Base class for all domain errors"""

    reason = "Operation failed"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or type(self).reason
        super().__init__(self.reason)


class NotFound(LeagueError):
    """Raised when a game, team, player, match or gallery link does not exist"""

    def __init__(self, entity_kind: str):
        self.entity_kind = entity_kind
        super().__init__(f"{entity_kind.capitalize()} not found")


class CapacityExceeded(LeagueError):
    reason = "Team is full"


class DuplicateRegistration(LeagueError):
    reason = "You have already registered for this game"


class InsufficientTeams(LeagueError):
    reason = "At least 2 teams are required to generate matches"


class InvalidStatusTransition(LeagueError):
    pass


class InvalidResult(LeagueError):
    pass


class PersistenceFailure(LeagueError):
    """Wraps any error raised by the persistence collaborator (see __cause__)"""

    reason = "Could not save changes, please try again"
