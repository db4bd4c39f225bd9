from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.match import Match
    from app.models.team import Team


class GameStatus(str, Enum):
    upcoming = "upcoming"
    completed = "completed"


class Game(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    scheduled_at: datetime
    venue_name: str
    address: str = Field(default="")
    maps_link: str = Field(default="")
    description: str = Field(default="")
    price_per_player: int = Field(default=0)
    max_players_per_team: int = Field(default=11)
    status: GameStatus = Field(default=GameStatus.upcoming.value, sa_column=Column(String, nullable=False))
    gallery_links: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )

    # Relationships (ordered: teams by creation, matches by shuffled sequence)
    teams: List["Team"] = Relationship(
        back_populates="game",
        sa_relationship_kwargs={"order_by": "Team.id", "cascade": "all, delete-orphan"},
    )
    matches: List["Match"] = Relationship(
        back_populates="game",
        sa_relationship_kwargs={"order_by": "Match.sequence", "cascade": "all, delete-orphan"},
    )
