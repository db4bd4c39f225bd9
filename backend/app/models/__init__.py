from app.models.game import Game, GameStatus
from app.models.match import Match
from app.models.player import Player, PlayerStatus
from app.models.sms_log import SmsLog
from app.models.team import Team

__all__ = [
    "Game",
    "GameStatus",
    "Team",
    "Player",
    "PlayerStatus",
    "Match",
    "SmsLog",
]
