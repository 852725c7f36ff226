"""Lookup table from HR event type to payload model and handlers.

Every ``HREventType`` must have an entry; the module refuses to import
otherwise. ``build_event_router`` turns the table into an ``EventRouter``
whose handlers parse the payload and submit through a ``HandlerContext``.
"""

import functools
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Type

from pydantic import BaseModel

from infrastructure.configuration.features import NotificationFeatureSettings
from infrastructure.events import DomainEvent, EventRouter
from infrastructure.notifications.models import NotificationRequest
from modules.notifications.events.context import HandlerContext
from modules.notifications.events.handlers import (
    attendance,
    employee,
    learning,
    performance,
    recruitment,
    system,
)
from modules.notifications.events.payloads import (
    ApplicationReceived,
    CertificationEarned,
    CourseAssigned,
    CourseCompleted,
    EmployeeCreated,
    EmployeeTerminated,
    EmployeeUpdated,
    GoalAssigned,
    HREventType,
    InterviewScheduled,
    LateCheckin,
    LeaveApproved,
    LeaveRejected,
    MissingCheckout,
    PerformanceReviewCompleted,
    PerformanceReviewDue,
    RecruitmentStatusUpdated,
    SystemMaintenance,
    UserAuthenticated,
)
from modules.notifications.service import NotificationService

PayloadHandler = Callable[[HandlerContext, Any], Any]


class EventBinding(NamedTuple):
    payload_model: Type[BaseModel]
    handlers: List[PayloadHandler]


EVENT_BINDINGS: Dict[HREventType, EventBinding] = {
    HREventType.EMPLOYEE_CREATED: EventBinding(
        EmployeeCreated,
        [employee.welcome_new_employee, employee.notify_manager_of_new_hire],
    ),
    HREventType.EMPLOYEE_UPDATED: EventBinding(
        EmployeeUpdated, [employee.notify_profile_updated]
    ),
    HREventType.EMPLOYEE_TERMINATED: EventBinding(
        EmployeeTerminated,
        [employee.notify_hr_of_termination, employee.notify_manager_of_departure],
    ),
    HREventType.RECRUITMENT_APPLICATION_RECEIVED: EventBinding(
        ApplicationReceived, [recruitment.notify_recruiter_of_application]
    ),
    HREventType.RECRUITMENT_INTERVIEW_SCHEDULED: EventBinding(
        InterviewScheduled, [recruitment.notify_candidate_of_interview]
    ),
    HREventType.RECRUITMENT_STATUS_UPDATED: EventBinding(
        RecruitmentStatusUpdated, [recruitment.notify_candidate_of_status]
    ),
    HREventType.PERFORMANCE_REVIEW_DUE: EventBinding(
        PerformanceReviewDue, [performance.notify_review_due]
    ),
    HREventType.PERFORMANCE_REVIEW_COMPLETED: EventBinding(
        PerformanceReviewCompleted, [performance.notify_review_completed]
    ),
    HREventType.PERFORMANCE_GOAL_ASSIGNED: EventBinding(
        GoalAssigned, [performance.notify_goal_assigned]
    ),
    HREventType.LEARNING_COURSE_ASSIGNED: EventBinding(
        CourseAssigned, [learning.notify_course_assigned]
    ),
    HREventType.LEARNING_COURSE_COMPLETED: EventBinding(
        CourseCompleted, [learning.notify_course_completed]
    ),
    HREventType.LEARNING_CERTIFICATION_EARNED: EventBinding(
        CertificationEarned, [learning.notify_certification_earned]
    ),
    HREventType.ATTENDANCE_LATE_CHECKIN: EventBinding(
        LateCheckin,
        [attendance.notify_late_checkin, attendance.notify_manager_of_late_pattern],
    ),
    HREventType.ATTENDANCE_MISSING_CHECKOUT: EventBinding(
        MissingCheckout, [attendance.notify_missing_checkout]
    ),
    HREventType.ATTENDANCE_LEAVE_APPROVED: EventBinding(
        LeaveApproved, [attendance.notify_leave_approved]
    ),
    HREventType.ATTENDANCE_LEAVE_REJECTED: EventBinding(
        LeaveRejected, [attendance.notify_leave_rejected]
    ),
    HREventType.USER_AUTHENTICATED: EventBinding(
        UserAuthenticated, [system.welcome_first_login]
    ),
    HREventType.SYSTEM_MAINTENANCE: EventBinding(
        SystemMaintenance, [system.broadcast_maintenance]
    ),
    HREventType.NOTIFICATION_REQUESTED: EventBinding(
        NotificationRequest, [system.forward_notification_request]
    ),
}

_unbound = [t.value for t in HREventType if t not in EVENT_BINDINGS]
if _unbound:
    raise RuntimeError(f"Event types without handlers: {', '.join(_unbound)}")


def _bind(
    handler: PayloadHandler,
    payload_model: Type[BaseModel],
    service: NotificationService,
    settings: NotificationFeatureSettings,
) -> Callable[[DomainEvent], Any]:
    def run(event: DomainEvent) -> Any:
        # ValidationError marks the event malformed in the router
        payload = payload_model.model_validate(event.data)
        ctx = HandlerContext(
            service=service, settings=settings, correlation_id=event.correlation_id
        )
        return handler(ctx, payload)

    return functools.update_wrapper(run, handler)


def build_event_router(
    service: NotificationService,
    settings: NotificationFeatureSettings,
    max_workers: int = 4,
    router: Optional[EventRouter] = None,
) -> EventRouter:
    """Register every HR event handler on a router."""
    router = router or EventRouter(max_workers=max_workers)
    for event_type, binding in EVENT_BINDINGS.items():
        for handler in binding.handlers:
            router.register(
                event_type.value,
                _bind(handler, binding.payload_model, service, settings),
            )
    return router
