# fanbase/tracking/service.py
import asyncio
import logging
from enum import Enum
from typing import Optional, Tuple
from fanbase.database.dependencies import Repositories
from fanbase.services.geolocation_service import GeolocationService
from fanbase.utils.client_ip import UNKNOWN_IP
from fanbase.utils.hashing import hash_visitor_ip
from fanbase.utils.rate_limiting import RateLimiter

logger = logging.getLogger(__name__)

MAX_USER_AGENT_LENGTH = 500

class VisitOutcome(str, Enum):
    RECORDED = "recorded"
    THROTTLED = "throttled"
    SKIPPED = "skipped"

class EngagementTracker:
    """Appends one visitor_logs row per address per throttle window.

    Only the hash of the address is stored. Subscriber and messaged flags are
    a snapshot taken at visit time and are never revisited.
    """

    def __init__(
        self,
        repositories: Optional[Repositories],
        limiter: RateLimiter,
        geolocation: GeolocationService
    ):
        self.repositories = repositories
        self.limiter = limiter
        self.geolocation = geolocation

    async def record_visit(self, ip: str, user_agent: Optional[str]) -> VisitOutcome:
        if not ip or ip == UNKNOWN_IP:
            return VisitOutcome.SKIPPED

        if not self.limiter.check_and_consume(ip):
            return VisitOutcome.THROTTLED

        if self.repositories is None:
            logger.warning("Visit not recorded, database unavailable")
            return VisitOutcome.SKIPPED

        location, (is_subscriber, has_messaged) = await asyncio.gather(
            self.geolocation.resolve(ip),
            self._engagement_snapshot(ip),
        )

        await self.repositories.visits.append(
            visitor_hash=hash_visitor_ip(ip),
            location=location,
            user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
            is_subscriber=is_subscriber,
            has_messaged=has_messaged
        )
        return VisitOutcome.RECORDED

    async def _engagement_snapshot(self, ip: str) -> Tuple[bool, bool]:
        try:
            return (
                await self.repositories.subscribers.exists_active_with_ip(ip),
                await self.repositories.messages.exists_with_ip(ip),
            )
        except Exception as e:
            logger.warning(f"Engagement lookup failed: {e}")
            return False, False
