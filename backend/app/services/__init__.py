"""
Services Layer

Pure business logic services that:
- Accept domain inputs (IDs, sessions, etc.)
- Return domain outputs (models, dataclasses)
- Do NOT depend on HTTP request/response objects
- Raise domain errors from app.services.errors
"""

# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from app.models.game import Game  # noqa: F401
from app.models.match import Match  # noqa: F401
from app.models.player import Player  # noqa: F401
from app.models.sms_log import SmsLog  # noqa: F401
from app.models.team import Team  # noqa: F401
