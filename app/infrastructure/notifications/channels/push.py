"""Push channel implementation using Firebase Cloud Messaging HTTP v1."""

from typing import Any, Dict, Optional, TYPE_CHECKING

import requests
import structlog
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from infrastructure.notifications.channels.base import ChannelAdapter
from infrastructure.notifications.errors import ConfigurationError
from infrastructure.notifications.models import (
    Channel,
    NotificationPriority,
    OutboundMessage,
)
from infrastructure.operations import (
    OperationResult,
    OperationStatus,
    classify_http_response,
    classify_request_exception,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()

FCM_SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]


def build_fcm_message(message: OutboundMessage) -> Dict[str, Any]:
    """Build the FCM v1 ``message`` object.

    ``image_url`` and ``click_action`` are lifted out of ``data`` into the
    notification payload; remaining data values are stringified because FCM
    only accepts string data.
    """
    data = dict(message.data)
    image_url = data.pop("image_url", None) or data.pop("imageUrl", None)
    click_action = data.pop("click_action", None) or data.pop("clickAction", None)

    notification: Dict[str, Any] = {
        "title": message.subject or "Notification",
        "body": message.body,
    }
    if image_url:
        notification["image"] = image_url

    android: Dict[str, Any] = {
        "priority": (
            "high"
            if message.priority in (NotificationPriority.HIGH, NotificationPriority.URGENT)
            else "normal"
        )
    }
    if click_action:
        android["notification"] = {"click_action": click_action}

    payload_data = {k: str(v) for k, v in data.items() if v is not None}
    payload_data["notification_id"] = message.notification_id

    return {
        "token": message.recipient,
        "notification": notification,
        "data": payload_data,
        "android": android,
    }


class PushAdapter(ChannelAdapter):
    """Push channel sending through FCM with a service-account session."""

    def __init__(
        self,
        settings: "Settings",
        session: Optional[requests.Session] = None,
    ):
        super().__init__()
        self._settings = settings.push
        self._session = session
        self._send_url: Optional[str] = None
        self.log = logger.bind(component="push_adapter")

    @property
    def channel(self) -> Channel:
        return Channel.PUSH

    def _configure(self) -> None:
        s = self._settings
        if not s.PUSH_ENABLED:
            raise ConfigurationError("Push channel disabled by PUSH_ENABLED")
        if not s.FCM_PROJECT_ID:
            raise ConfigurationError("FCM_PROJECT_ID is not set")

        if self._session is None:
            if not s.FCM_SERVICE_ACCOUNT_FILE:
                raise ConfigurationError("FCM_SERVICE_ACCOUNT_FILE is not set")
            try:
                credentials = service_account.Credentials.from_service_account_file(
                    s.FCM_SERVICE_ACCOUNT_FILE, scopes=FCM_SCOPES
                )
            except (OSError, ValueError, GoogleAuthError) as e:
                raise ConfigurationError(f"Unable to load FCM credentials: {e}") from e
            self._session = AuthorizedSession(credentials)

        self._send_url = (
            f"{s.FCM_API_URL.rstrip('/')}/projects/{s.FCM_PROJECT_ID}/messages:send"
        )

    def _deliver(self, message: OutboundMessage) -> OperationResult:
        try:
            response = self._session.post(
                self._send_url,
                json={"message": build_fcm_message(message)},
                timeout=self._settings.PUSH_TIMEOUT_SECONDS,
            )
        except GoogleAuthError as e:
            return OperationResult.error(
                OperationStatus.UNAUTHORIZED,
                f"fcm token refresh failed: {e}",
                error_code="FCM_UNAUTHORIZED",
            )
        except requests.RequestException as e:
            return classify_request_exception(e, provider="fcm")

        if response.status_code != 200:
            return classify_http_response(
                response.status_code,
                response.text,
                provider="fcm",
                headers=response.headers,
            )

        return OperationResult.success(
            data={"message_id": response.json().get("name")},
            message="FCM accepted push notification",
        )

    def _release(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
