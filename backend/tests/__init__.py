# Register every table with SQLModel metadata before any test creates the schema
from app.models.game import Game  # noqa: F401
from app.models.match import Match  # noqa: F401
from app.models.player import Player  # noqa: F401
from app.models.sms_log import SmsLog  # noqa: F401
from app.models.team import Team  # noqa: F401
