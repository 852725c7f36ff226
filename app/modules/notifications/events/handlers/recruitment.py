"""Recruitment pipeline handlers."""

from infrastructure.notifications.models import NotificationType
from modules.notifications.events.context import HandlerContext
from modules.notifications.events.payloads import (
    ApplicationReceived,
    InterviewScheduled,
    RecruitmentStatusUpdated,
)

SOURCE = "recruitment-service"


def notify_recruiter_of_application(ctx: HandlerContext, payload: ApplicationReceived):
    if not payload.recruiter_id:
        return None
    return ctx.notify(
        NotificationType.RECRUITMENT_APPLICATION_RECEIVED,
        user_id=payload.recruiter_id,
        subject="New Job Application",
        message=(
            f"{payload.candidate_name} has applied for the "
            f"{payload.position_title} position. Please review their application."
        ),
        data={
            "candidate_id": payload.candidate_id,
            "position_title": payload.position_title,
        },
        source=SOURCE,
    )


def notify_candidate_of_interview(ctx: HandlerContext, payload: InterviewScheduled):
    return ctx.notify(
        NotificationType.RECRUITMENT_INTERVIEW_SCHEDULED,
        email=payload.candidate_email,
        subject=f"Interview Scheduled - {payload.position_title}",
        message=(
            f"Hi {payload.candidate_name}, your {payload.interview_type} interview "
            f"for the {payload.position_title} position has been scheduled for "
            f"{payload.interview_date}. We look forward to meeting you!"
        ),
        data={
            "candidate_id": payload.candidate_id,
            "interview_date": payload.interview_date,
            "interview_type": payload.interview_type,
        },
        source=SOURCE,
    )


def notify_candidate_of_status(ctx: HandlerContext, payload: RecruitmentStatusUpdated):
    message = (
        f"Hi {payload.candidate_name}, your application status for the "
        f"{payload.position_title} position has been updated to: {payload.status}."
    )
    if payload.feedback:
        message = f"{message} {payload.feedback}"
    return ctx.notify(
        NotificationType.RECRUITMENT_STATUS_UPDATED,
        email=payload.candidate_email,
        subject=f"Application Update - {payload.position_title}",
        message=message,
        data={"candidate_id": payload.candidate_id, "status": payload.status},
        source=SOURCE,
    )
