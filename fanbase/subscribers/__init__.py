# fanbase/subscribers/__init__.py
from .service import (
    SubscriberService,
    SubscribeResult,
    TokenStatus,
    UnsubscribeOutcome,
    generate_unsubscribe_token,
)
from .export import subscribers_to_csv

__all__ = [
    "SubscriberService",
    "SubscribeResult",
    "TokenStatus",
    "UnsubscribeOutcome",
    "generate_unsubscribe_token",
    "subscribers_to_csv",
]
