"""Platform-wide handlers: first login, maintenance windows and direct requests."""

from infrastructure.notifications.models import NotificationRequest, NotificationType
from modules.notifications.events.context import HandlerContext
from modules.notifications.events.payloads import SystemMaintenance, UserAuthenticated


def welcome_first_login(ctx: HandlerContext, payload: UserAuthenticated):
    if not payload.is_first_login:
        return None
    return ctx.notify(
        NotificationType.SYSTEM_ALERT,
        user_id=payload.user_id,
        email=payload.email,
        subject="Welcome to HRMS",
        message=(
            "Welcome to our HRMS! Please complete your profile setup and explore "
            "the features available to you."
        ),
        data={"first_login": True},
        source="auth-service",
    )


def broadcast_maintenance(ctx: HandlerContext, payload: SystemMaintenance):
    services = ", ".join(payload.affected_services) or "none"
    return ctx.notify(
        NotificationType.SYSTEM_MAINTENANCE,
        email=ctx.settings.broadcast_email,
        subject="Scheduled System Maintenance",
        message=(
            f"System maintenance is scheduled from {payload.start_time} to "
            f"{payload.end_time}. {payload.description} Affected services: {services}."
        ),
        data={
            "start_time": payload.start_time,
            "end_time": payload.end_time,
            "affected_services": list(payload.affected_services),
        },
        source="system",
    )


def forward_notification_request(ctx: HandlerContext, payload: NotificationRequest):
    """Pass a producer-built request straight through under the event's correlation id."""
    request = payload.model_copy(update={"correlation_id": ctx.correlation_id})
    return ctx.service.submit(request)
