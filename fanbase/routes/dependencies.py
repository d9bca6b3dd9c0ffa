# fanbase/routes/dependencies.py
from typing import Optional
from fastapi import Depends
from fanbase.contact.service import ContactService
from fanbase.database.dependencies import (
    Repositories,
    RepositorySession,
    get_optional_repositories,
    get_repositories,
    get_repository_session,
)
from fanbase.notifications.dispatcher import NotificationDispatcher
from fanbase.services.email_service import EmailService, get_email_service
from fanbase.services.geolocation_service import GeolocationService, get_geolocation_service
from fanbase.subscribers.service import SubscriberService
from fanbase.tracking.service import EngagementTracker
from fanbase.utils.rate_limiting import (
    RateLimiter,
    get_contact_limiter,
    get_subscribe_limiter,
    get_visit_limiter,
)

def get_subscriber_service(
    repositories: Repositories = Depends(get_repositories),
    limiter: RateLimiter = Depends(get_subscribe_limiter),
    geolocation: GeolocationService = Depends(get_geolocation_service)
) -> SubscriberService:
    return SubscriberService(repositories, limiter, geolocation)

def get_contact_service(
    repositories: Repositories = Depends(get_repositories),
    limiter: RateLimiter = Depends(get_contact_limiter),
    geolocation: GeolocationService = Depends(get_geolocation_service)
) -> ContactService:
    return ContactService(repositories, limiter, geolocation)

def get_engagement_tracker(
    repositories: Optional[Repositories] = Depends(get_optional_repositories),
    limiter: RateLimiter = Depends(get_visit_limiter),
    geolocation: GeolocationService = Depends(get_geolocation_service)
) -> EngagementTracker:
    return EngagementTracker(repositories, limiter, geolocation)

def get_dispatcher(
    email_service: EmailService = Depends(get_email_service),
    session: RepositorySession = Depends(get_repository_session)
) -> NotificationDispatcher:
    return NotificationDispatcher(email_service, session)
