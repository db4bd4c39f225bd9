from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.game import Game


class Match(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    game_id: int = Field(foreign_key="game.id", index=True)
    sequence: int  # 0-based position in the shuffled match list

    # Team snapshots taken at generation time (not re-synced on rename)
    team_a_id: int = Field(foreign_key="team.id")
    team_a_name: str
    team_b_id: int = Field(foreign_key="team.id")
    team_b_name: str

    # Result (null until recorded)
    score_a: Optional[int] = Field(default=None)
    score_b: Optional[int] = Field(default=None)
    scorers_a: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    scorers_b: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    result_recorded_at: Optional[datetime] = Field(default=None)

    # Relationships
    game: "Game" = Relationship(back_populates="matches")

    @property
    def has_result(self) -> bool:
        return self.score_a is not None and self.score_b is not None
