"""Notification pipeline core models.

Pydantic models for everything that crosses a component boundary:
submission requests, persisted records, delivery log entries, user
preferences, templates and the channel-agnostic outbound message handed to
adapters.

Uses Pydantic BaseModel for:
- RFC 5322 compliant email validation (EmailStr)
- E.164 phone number validation
- Re-validation of record invariants on every store update
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Channel(Enum):
    """Delivery medium. Each value has exactly one adapter."""

    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"
    IN_APP = "IN_APP"


class NotificationType(Enum):
    """Closed set of notification categories.

    The prefix before the first underscore selects the preference category
    (``EMPLOYEE_`` → employee updates, ``ATTENDANCE_`` → attendance alerts).
    """

    EMPLOYEE_WELCOME = "EMPLOYEE_WELCOME"
    EMPLOYEE_UPDATED = "EMPLOYEE_UPDATED"
    EMPLOYEE_TERMINATED = "EMPLOYEE_TERMINATED"
    RECRUITMENT_APPLICATION_RECEIVED = "RECRUITMENT_APPLICATION_RECEIVED"
    RECRUITMENT_INTERVIEW_SCHEDULED = "RECRUITMENT_INTERVIEW_SCHEDULED"
    RECRUITMENT_STATUS_UPDATED = "RECRUITMENT_STATUS_UPDATED"
    PERFORMANCE_REVIEW_DUE = "PERFORMANCE_REVIEW_DUE"
    PERFORMANCE_REVIEW_COMPLETED = "PERFORMANCE_REVIEW_COMPLETED"
    PERFORMANCE_GOAL_ASSIGNED = "PERFORMANCE_GOAL_ASSIGNED"
    LEARNING_COURSE_ASSIGNED = "LEARNING_COURSE_ASSIGNED"
    LEARNING_COURSE_COMPLETED = "LEARNING_COURSE_COMPLETED"
    LEARNING_CERTIFICATION_EARNED = "LEARNING_CERTIFICATION_EARNED"
    ATTENDANCE_LATE_CHECKIN = "ATTENDANCE_LATE_CHECKIN"
    ATTENDANCE_MISSING_CHECKOUT = "ATTENDANCE_MISSING_CHECKOUT"
    ATTENDANCE_LEAVE_APPROVED = "ATTENDANCE_LEAVE_APPROVED"
    ATTENDANCE_LEAVE_REJECTED = "ATTENDANCE_LEAVE_REJECTED"
    SYSTEM_ALERT = "SYSTEM_ALERT"
    SYSTEM_MAINTENANCE = "SYSTEM_MAINTENANCE"
    CUSTOM = "CUSTOM"


class NotificationPriority(Enum):
    """Notification priority levels.

    HIGH and URGENT jobs are preferred by the dispatch queue. URGENT
    notifications also bypass quiet hours.
    """

    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationStatus(Enum):
    """Record lifecycle: PENDING → DELIVERED | FAILED, FAILED → PENDING on retry."""

    PENDING = "PENDING"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class DeliveryAction(Enum):
    QUEUED = "queued"
    DELIVERED = "delivered"
    FAILED = "failed"
    READ = "read"


def _validate_e164(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.startswith("+") or not v[1:].isdigit():
        raise ValueError(f"Phone number must be in E.164 format: {v}")
    if len(v) < 8 or len(v) > 16:
        raise ValueError(f"Phone number length invalid: {v}")
    return v


class NotificationRequest(BaseModel):
    """Submission accepted by the notification service.

    Either ``user_id`` or a raw address (email, phone number, device token)
    must be present. Field aliases accept the camelCase wire format used by
    event producers.

    Example:
        request = NotificationRequest(
            type=NotificationType.EMPLOYEE_WELCOME,
            channel=Channel.EMAIL,
            email="ann@example.com",
            subject="Welcome to the company, Ann!",
            message="Hi Ann, welcome to our HRMS!",
            correlation_id="corr-123",
            source="employee-service",
        )
    """

    model_config = ConfigDict(populate_by_name=True)

    type: NotificationType
    channel: Channel
    priority: NotificationPriority = NotificationPriority.NORMAL
    user_id: Optional[str] = Field(default=None, alias="userId")
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    device_token: Optional[str] = Field(default=None, alias="deviceToken")
    subject: Optional[str] = None
    message: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)
    template_id: Optional[str] = Field(default=None, alias="templateId")
    correlation_id: Optional[str] = Field(default=None, alias="correlationId")
    source: str = "notification-service"

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, v: Optional[str]) -> Optional[str]:
        return _validate_e164(v)

    @model_validator(mode="after")
    def validate_recipient_and_body(self) -> "NotificationRequest":
        if not (self.user_id or self.email or self.phone_number or self.device_token):
            raise ValueError("A user_id or a recipient address is required")
        if not self.template_id and not self.message.strip():
            raise ValueError("Notification message cannot be empty")
        return self


class NotificationRecord(BaseModel):
    """Persisted notification intent and its latest delivery state.

    History lives in the delivery log; this model only holds the current
    state. Updates go through ``apply`` so invariants are re-validated.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    type: NotificationType
    channel: Channel
    priority: NotificationPriority = NotificationPriority.NORMAL
    user_id: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    device_token: Optional[str] = None
    subject: Optional[str] = None
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    correlation_id: Optional[str] = None
    source: str = "notification-service"
    template_id: Optional[str] = None

    status: NotificationStatus = NotificationStatus.PENDING
    retry_count: int = Field(default=0, ge=0)
    max_retries: int = Field(default=3, ge=0)
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    sent_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None
    read_at: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_lifecycle(self) -> "NotificationRecord":
        if self.retry_count > self.max_retries:
            raise ValueError(
                f"retry_count ({self.retry_count}) exceeds max_retries ({self.max_retries})"
            )
        return self

    @property
    def can_retry(self) -> bool:
        return (
            self.status == NotificationStatus.FAILED
            and self.retry_count < self.max_retries
        )

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def apply(self, changes: Dict[str, Any]) -> "NotificationRecord":
        """Return a validated copy with ``changes`` applied."""
        return NotificationRecord.model_validate({**self.model_dump(), **changes})


class DeliveryLogEntry(BaseModel):
    """Append-only audit entry for one record transition."""

    model_config = ConfigDict(frozen=True)

    notification_id: str
    action: DeliveryAction
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)


class QuietHours(BaseModel):
    """Local time window, ``start > end`` wraps midnight."""

    start: str
    end: str
    timezone: str = "UTC"

    @field_validator("start", "end")
    @classmethod
    def validate_time_of_day(cls, v: str) -> str:
        parts = v.split(":")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"Time must be HH:MM: {v}")
        hours, minutes = int(parts[0]), int(parts[1])
        if not (0 <= hours < 24 and 0 <= minutes < 60):
            raise ValueError(f"Time out of range: {v}")
        return v


class UserPreference(BaseModel):
    """Per-user channel and category switches. Everything defaults to enabled."""

    user_id: str
    email_enabled: bool = True
    sms_enabled: bool = True
    push_enabled: bool = True
    employee_updates: bool = True
    system_alerts: bool = True
    recruitment_updates: bool = True
    performance_updates: bool = True
    learning_updates: bool = True
    attendance_alerts: bool = True
    quiet_hours: Optional[QuietHours] = None


class NotificationTemplate(BaseModel):
    """Stored template with ``{{variable}}`` placeholders."""

    id: str
    name: str
    channel: Optional[Channel] = None
    subject: Optional[str] = None
    body: str
    is_active: bool = True


class OutboundMessage(BaseModel):
    """Channel-agnostic message handed to a channel adapter.

    ``recipient`` is an email address, E.164 number, device token or user id
    depending on the channel.
    """

    notification_id: str
    channel: Channel
    recipient: str
    subject: Optional[str] = None
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL
    user_id: Optional[str] = None
