# fanbase/subscribers/export.py
import csv
import io
from typing import Iterable
from fanbase.models import Subscriber

EXPORT_HEADERS = ["Email", "Event Alerts", "Status", "Country", "City", "Joined", "Unsubscribed", "Reason"]

def subscribers_to_csv(subscribers: Iterable[Subscriber]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    for subscriber in subscribers:
        writer.writerow([
            subscriber.email,
            "Yes" if subscriber.receive_event_alerts else "No",
            "Active" if subscriber.is_active else "Unsubscribed",
            subscriber.country or "",
            subscriber.city or "",
            subscriber.joined_at.date().isoformat(),
            subscriber.unsubscribed_at.date().isoformat() if subscriber.unsubscribed_at else "",
            subscriber.unsubscribe_reason or "",
        ])
    return buffer.getvalue()
