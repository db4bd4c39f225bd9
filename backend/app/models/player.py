from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.team import Team


class PlayerStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    rejected = "rejected"


class Player(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    game_id: int = Field(foreign_key="game.id", index=True)  # denormalized for game-wide contact checks
    team_id: int = Field(foreign_key="team.id", index=True)
    name: str
    contact: str = Field(index=True)  # de-duplication key within a game

    # Proof of payment reference (the file itself lives in object storage)
    proof_file_name: str
    proof_file_type: str
    proof_file_url: str

    status: PlayerStatus = Field(default=PlayerStatus.pending.value, sa_column=Column(String, nullable=False))
    registered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    team: "Team" = Relationship(back_populates="players")
