from .service import EngagementTracker, VisitOutcome

__all__ = ["EngagementTracker", "VisitOutcome"]
