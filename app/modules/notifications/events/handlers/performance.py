from infrastructure.notifications.models import NotificationType
from modules.notifications.events.context import HandlerContext
from modules.notifications.events.payloads import (
    GoalAssigned,
    PerformanceReviewCompleted,
    PerformanceReviewDue,
)

SOURCE = "performance-service"


def notify_review_due(ctx: HandlerContext, payload: PerformanceReviewDue):
    return ctx.notify(
        NotificationType.PERFORMANCE_REVIEW_DUE,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="Performance Review Due",
        message=(
            f"Your performance review with {payload.reviewer_name} is due by "
            f"{payload.due_date}. Please complete your self-assessment."
        ),
        data={"review_id": payload.review_id, "due_date": payload.due_date},
        source=SOURCE,
    )


def notify_review_completed(ctx: HandlerContext, payload: PerformanceReviewCompleted):
    return ctx.notify(
        NotificationType.PERFORMANCE_REVIEW_COMPLETED,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="Performance Review Completed",
        message=(
            f"Your performance review has been completed by {payload.reviewer_name}. "
            f"Overall rating: {payload.rating}. Please review the feedback and "
            "development plan."
        ),
        data={"review_id": payload.review_id, "rating": payload.rating},
        source=SOURCE,
    )


def notify_goal_assigned(ctx: HandlerContext, payload: GoalAssigned):
    return ctx.notify(
        NotificationType.PERFORMANCE_GOAL_ASSIGNED,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="New Goal Assigned",
        message=(
            f'A new goal "{payload.goal_title}" has been assigned to you by '
            f"{payload.assigned_by}. Due date: {payload.due_date}."
        ),
        data={"goal_id": payload.goal_id, "due_date": payload.due_date},
        source=SOURCE,
    )
