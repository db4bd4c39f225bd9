from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from app.models.player import PlayerStatus

if TYPE_CHECKING:
    from app.models.game import Game
    from app.models.player import Player


class Team(SQLModel, table=True):
    __table_args__ = (
        # Team names are unique within a game
        SAUniqueConstraint("game_id", "name", name="uq_game_team_name"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    game_id: int = Field(foreign_key="game.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    game: "Game" = Relationship(back_populates="teams")
    players: List["Player"] = Relationship(
        back_populates="team",
        sa_relationship_kwargs={"order_by": "Player.id", "cascade": "all, delete-orphan"},
    )

    def active_players(self) -> List["Player"]:
        """Players that hold a slot on the team (anything not rejected)."""
        return [p for p in self.players if p.status != PlayerStatus.rejected]
