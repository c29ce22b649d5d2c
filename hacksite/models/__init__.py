"""
hacksite – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them
through a single ``from hacksite.models import *`` import.
"""

from hacksite.models.user import User                   # noqa: F401
from hacksite.models.idea import Idea                   # noqa: F401
from hacksite.models.idea_vote import IdeaVote          # noqa: F401
from hacksite.models.team import Team                   # noqa: F401
from hacksite.models.team_member import TeamMember      # noqa: F401
from hacksite.models.project import Project             # noqa: F401
from hacksite.models.showcase_vote import ShowcaseVote  # noqa: F401
from hacksite.models.judge_vote import JudgeVote        # noqa: F401
from hacksite.models.admin_phase import AdminPhase      # noqa: F401
from hacksite.models.feedback import Feedback           # noqa: F401
