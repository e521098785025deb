"""clozerev: cloze-deletion spaced repetition."""

__version__ = "0.1.0"

from clozerev.models import Card, Quality, RenderRequest, SessionSummary
from clozerev.review_session import ReviewSession, open_session
from clozerev.scheduler import schedule

__all__ = ["Card", "Quality", "RenderRequest", "ReviewSession", "SessionSummary",
           "open_session", "schedule"]
