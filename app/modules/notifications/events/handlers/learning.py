from infrastructure.notifications.models import NotificationType
from modules.notifications.events.context import HandlerContext
from modules.notifications.events.payloads import (
    CertificationEarned,
    CourseAssigned,
    CourseCompleted,
)

SOURCE = "learning-service"


def notify_course_assigned(ctx: HandlerContext, payload: CourseAssigned):
    return ctx.notify(
        NotificationType.LEARNING_COURSE_ASSIGNED,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="New Learning Course Assigned",
        message=(
            f'You have been enrolled in the course "{payload.course_title}" by '
            f"{payload.assigned_by}. Please complete it by {payload.due_date}."
        ),
        data={"course_id": payload.course_id, "due_date": payload.due_date},
        source=SOURCE,
    )


def notify_course_completed(ctx: HandlerContext, payload: CourseCompleted):
    return ctx.notify(
        NotificationType.LEARNING_COURSE_COMPLETED,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="Course Completed",
        message=(
            f'Congratulations! You have successfully completed "{payload.course_title}" '
            f"on {payload.completion_date}. Score: {payload.score}%."
        ),
        data={"course_id": payload.course_id, "score": payload.score},
        source=SOURCE,
    )


def notify_certification_earned(ctx: HandlerContext, payload: CertificationEarned):
    return ctx.notify(
        NotificationType.LEARNING_CERTIFICATION_EARNED,
        user_id=payload.employee_id,
        email=payload.employee_email,
        subject="Certification Earned!",
        message=(
            f'Congratulations! You have earned the "{payload.certification_name}" '
            f"certification on {payload.earned_date}. This has been added to your profile."
        ),
        data={"certification_id": payload.certification_id},
        source=SOURCE,
    )
