"""Channel adapters for the notification pipeline."""

from infrastructure.notifications.channels.base import ChannelAdapter
from infrastructure.notifications.channels.email import EmailAdapter
from infrastructure.notifications.channels.in_app import InAppAdapter, InboxItem
from infrastructure.notifications.channels.push import PushAdapter
from infrastructure.notifications.channels.sms import SMSAdapter

__all__ = [
    "ChannelAdapter",
    "EmailAdapter",
    "InAppAdapter",
    "InboxItem",
    "PushAdapter",
    "SMSAdapter",
]
