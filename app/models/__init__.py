# app/models/__init__.py

from .user import User
from .team import Team
from .game_session import GameSession
from .round import Round
from .question import Question, QuestionOption, QuestionCategory, QuestionTag
from .submission import Submission
from .case_file import CaseFile
from .bulk_operation import BulkOperation

__all__ = [
    "User",
    "Team",
    "GameSession",
    "Round",
    "Question",
    "QuestionOption",
    "QuestionCategory",
    "QuestionTag",
    "Submission",
    "CaseFile",
    "BulkOperation",
]
