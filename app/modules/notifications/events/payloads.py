"""HR domain event types and their payload models.

Each event type is bound to exactly one payload model. Producers publish
camelCase keys; models accept either camelCase or snake_case and ignore
fields they do not use.
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class HREventType(Enum):
    EMPLOYEE_CREATED = "employee.created"
    EMPLOYEE_UPDATED = "employee.updated"
    EMPLOYEE_TERMINATED = "employee.terminated"
    RECRUITMENT_APPLICATION_RECEIVED = "recruitment.application.received"
    RECRUITMENT_INTERVIEW_SCHEDULED = "recruitment.interview.scheduled"
    RECRUITMENT_STATUS_UPDATED = "recruitment.status.updated"
    PERFORMANCE_REVIEW_DUE = "performance.review.due"
    PERFORMANCE_REVIEW_COMPLETED = "performance.review.completed"
    PERFORMANCE_GOAL_ASSIGNED = "performance.goal.assigned"
    LEARNING_COURSE_ASSIGNED = "learning.course.assigned"
    LEARNING_COURSE_COMPLETED = "learning.course.completed"
    LEARNING_CERTIFICATION_EARNED = "learning.certification.earned"
    ATTENDANCE_LATE_CHECKIN = "attendance.late.checkin"
    ATTENDANCE_MISSING_CHECKOUT = "attendance.missing.checkout"
    ATTENDANCE_LEAVE_APPROVED = "attendance.leave.approved"
    ATTENDANCE_LEAVE_REJECTED = "attendance.leave.rejected"
    USER_AUTHENTICATED = "user.authenticated"
    SYSTEM_MAINTENANCE = "system.maintenance"
    NOTIFICATION_REQUESTED = "notification.requested"


class EventPayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


# Employee


class EmployeeCreated(EventPayload):
    employee_id: str
    email: EmailStr
    first_name: str
    last_name: str = ""
    manager_id: Optional[str] = None


class EmployeeUpdated(EventPayload):
    employee_id: str
    email: Optional[EmailStr] = None
    changes: List[str] = Field(default_factory=list)


class EmployeeTerminated(EventPayload):
    employee_id: str
    first_name: str
    last_name: str = ""
    termination_date: str
    email: Optional[EmailStr] = None
    manager_id: Optional[str] = None


# Recruitment


class ApplicationReceived(EventPayload):
    candidate_id: str
    candidate_name: str
    position_title: str
    candidate_email: Optional[EmailStr] = None
    recruiter_id: Optional[str] = None


class InterviewScheduled(EventPayload):
    candidate_id: str
    candidate_name: str
    candidate_email: EmailStr
    position_title: str
    interview_date: str
    interview_type: str


class RecruitmentStatusUpdated(EventPayload):
    candidate_id: str
    candidate_name: str
    candidate_email: EmailStr
    position_title: str
    status: str
    feedback: Optional[str] = None


# Performance


class EmployeeEventPayload(EventPayload):
    """Events addressed to one employee."""

    employee_id: str
    employee_email: Optional[EmailStr] = None


class PerformanceReviewDue(EmployeeEventPayload):
    review_id: str
    due_date: str
    reviewer_name: str


class PerformanceReviewCompleted(EmployeeEventPayload):
    review_id: str
    rating: Union[float, str]
    reviewer_name: str


class GoalAssigned(EmployeeEventPayload):
    goal_id: str
    goal_title: str
    due_date: str
    assigned_by: str


# Learning


class CourseAssigned(EmployeeEventPayload):
    course_id: str
    course_title: str
    due_date: str
    assigned_by: str


class CourseCompleted(EmployeeEventPayload):
    course_id: str
    course_title: str
    completion_date: str
    score: Union[float, str]


class CertificationEarned(EmployeeEventPayload):
    certification_id: str
    certification_name: str
    earned_date: str


# Attendance


class LateCheckin(EmployeeEventPayload):
    checkin_time: str
    scheduled_time: str
    manager_id: Optional[str] = None
    is_repeated: bool = False


class MissingCheckout(EmployeeEventPayload):
    date: str
    manager_id: Optional[str] = None


class LeaveApproved(EmployeeEventPayload):
    leave_id: str
    leave_type: str
    start_date: str
    end_date: str
    approved_by: str


class LeaveRejected(EmployeeEventPayload):
    leave_id: str
    leave_type: str
    start_date: str
    end_date: str
    rejected_by: str
    reason: str = ""


# System


class UserAuthenticated(EventPayload):
    user_id: str
    email: Optional[EmailStr] = None
    is_first_login: bool = False
    last_login_at: Optional[str] = None


class SystemMaintenance(EventPayload):
    start_time: str
    end_time: str
    description: str = ""
    affected_services: List[str] = Field(default_factory=list)
