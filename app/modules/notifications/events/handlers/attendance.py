"""Attendance and leave handlers.

Check-in reminders go to the in-app inbox; leave decisions go out by email.
"""

from infrastructure.notifications.models import Channel, NotificationType
from modules.notifications.events.context import HandlerContext
from modules.notifications.events.payloads import (
    LateCheckin,
    LeaveApproved,
    LeaveRejected,
    MissingCheckout,
)

SOURCE = "attendance-service"


def notify_late_checkin(ctx: HandlerContext, payload: LateCheckin):
    return ctx.notify(
        NotificationType.ATTENDANCE_LATE_CHECKIN,
        channel=Channel.IN_APP,
        user_id=payload.employee_id,
        subject="Late Check-in Recorded",
        message=(
            f"Your check-in at {payload.checkin_time} was recorded as late. "
            f"Scheduled time was {payload.scheduled_time}."
        ),
        data={
            "checkin_time": payload.checkin_time,
            "scheduled_time": payload.scheduled_time,
        },
        source=SOURCE,
    )


def notify_manager_of_late_pattern(ctx: HandlerContext, payload: LateCheckin):
    if not (payload.manager_id and payload.is_repeated):
        return None
    return ctx.notify(
        NotificationType.ATTENDANCE_LATE_CHECKIN,
        channel=Channel.IN_APP,
        user_id=payload.manager_id,
        subject="Employee Late Check-in Pattern",
        message="Employee has had multiple late check-ins this week. Please follow up.",
        data={"employee_id": payload.employee_id},
        source=SOURCE,
    )


def notify_missing_checkout(ctx: HandlerContext, payload: MissingCheckout):
    return ctx.notify(
        NotificationType.ATTENDANCE_MISSING_CHECKOUT,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="Missing Check-out",
        message=(
            f"You forgot to check out yesterday ({payload.date}). Please update "
            "your timesheet or contact your manager."
        ),
        data={"date": payload.date},
        source=SOURCE,
    )


def notify_leave_approved(ctx: HandlerContext, payload: LeaveApproved):
    return ctx.notify(
        NotificationType.ATTENDANCE_LEAVE_APPROVED,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="Leave Request Approved",
        message=(
            f"Your {payload.leave_type} leave request from {payload.start_date} to "
            f"{payload.end_date} has been approved by {payload.approved_by}."
        ),
        data={"leave_id": payload.leave_id, "leave_type": payload.leave_type},
        source=SOURCE,
    )


def notify_leave_rejected(ctx: HandlerContext, payload: LeaveRejected):
    return ctx.notify(
        NotificationType.ATTENDANCE_LEAVE_REJECTED,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="Leave Request Rejected",
        message=(
            f"Your {payload.leave_type} leave request from {payload.start_date} to "
            f"{payload.end_date} has been rejected by {payload.rejected_by}. "
            f"Reason: {payload.reason}"
        ).strip(),
        data={"leave_id": payload.leave_id, "reason": payload.reason},
        source=SOURCE,
    )
