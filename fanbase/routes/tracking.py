# fanbase/routes/tracking.py
from fastapi import APIRouter, Depends, Request
import logging
from fanbase.routes.dependencies import get_engagement_tracker
from fanbase.tracking.service import EngagementTracker, VisitOutcome
from fanbase.utils.client_ip import get_client_ip

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["tracking"])

@router.post("/track-visit")
async def track_visit(request: Request, tracker: EngagementTracker = Depends(get_engagement_tracker)):
    """Record a page visit. Always answers 200."""
    try:
        outcome = await tracker.record_visit(get_client_ip(request), request.headers.get("user-agent"))
    except Exception as e:
        logger.error(f"Visit tracking failed: {e}")
        return {"success": True}

    if outcome is VisitOutcome.THROTTLED:
        return {"success": True, "cached": True}
    return {"success": True}
