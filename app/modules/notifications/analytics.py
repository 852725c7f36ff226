"""Delivery analytics.

Read-only aggregations over the notification store and delivery log. Not on
the delivery hot path; results may lag in-flight deliveries.
"""

from collections import Counter, defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from infrastructure.notifications.models import (
    Channel,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
)
from infrastructure.persistence.notifications import (
    DeliveryLog,
    NotificationQuery,
    NotificationStore,
)


def _rate(part: int, whole: int) -> float:
    """Percentage rounded to two decimals; 0.0 when nothing was sent."""
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 2)


def _bucket(records: Iterable[NotificationRecord]) -> Dict[str, Any]:
    sent = delivered = failed = 0
    for r in records:
        sent += 1
        if r.status == NotificationStatus.DELIVERED:
            delivered += 1
        elif r.status == NotificationStatus.FAILED:
            failed += 1
    return {
        "sent": sent,
        "delivered": delivered,
        "failed": failed,
        "delivery_rate": _rate(delivered, sent),
    }


class DeliveryAnalytics:
    def __init__(self, store: NotificationStore, delivery_log: DeliveryLog):
        self.store = store
        self.delivery_log = delivery_log

    def get_delivery_analytics(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        notification_type: Optional[NotificationType] = None,
        channel: Optional[Channel] = None,
    ) -> Dict[str, Any]:
        """Delivery and failure rates with channel, type and daily breakdowns.

        ``total_sent`` counts every record created in the period, whatever
        its current status. Rates are percentages of ``total_sent``.
        """
        records = self.store.query(
            NotificationQuery(
                type=notification_type,
                channel=channel,
                created_from=start,
                created_to=end,
            )
        )
        totals = _bucket(records)

        by_channel: Dict[str, List[NotificationRecord]] = defaultdict(list)
        by_type: Dict[str, List[NotificationRecord]] = defaultdict(list)
        by_day: Dict[str, List[NotificationRecord]] = defaultdict(list)
        for r in records:
            by_channel[r.channel.value].append(r)
            by_type[r.type.value].append(r)
            by_day[r.created_at.date().isoformat()].append(r)

        daily_metrics = []
        for day in sorted(by_day):
            bucket = _bucket(by_day[day])
            daily_metrics.append(
                {
                    "date": day,
                    "sent": bucket["sent"],
                    "delivered": bucket["delivered"],
                    "failed": bucket["failed"],
                }
            )

        return {
            "period": {
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
            },
            "total_sent": totals["sent"],
            "delivered": totals["delivered"],
            "failed": totals["failed"],
            "pending": totals["sent"] - totals["delivered"] - totals["failed"],
            "delivery_rate": totals["delivery_rate"],
            "failure_rate": _rate(totals["failed"], totals["sent"]),
            "by_channel": {k: _bucket(v) for k, v in sorted(by_channel.items())},
            "by_type": {k: _bucket(v) for k, v in sorted(by_type.items())},
            "daily_metrics": daily_metrics,
            "log_activity": self.get_log_activity(
                start, end, {r.id for r in records}
            ),
        }

    def get_log_activity(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        notification_ids: Optional[set] = None,
    ) -> Dict[str, int]:
        """Delivery log entries per action in the period.

        Counts attempts rather than outcomes: a record that failed twice and
        was then delivered contributes two ``failed`` and one ``delivered``.
        """
        entries = self.delivery_log.list_entries(since=start, until=end)
        counts = Counter(
            e.action.value
            for e in entries
            if notification_ids is None or e.notification_id in notification_ids
        )
        return dict(sorted(counts.items()))
