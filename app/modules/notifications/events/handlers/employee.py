"""Employee lifecycle handlers."""

from infrastructure.notifications.models import Channel, NotificationType
from modules.notifications.events.context import HandlerContext
from modules.notifications.events.payloads import (
    EmployeeCreated,
    EmployeeTerminated,
    EmployeeUpdated,
)

SOURCE = "employee-service"

# Changes that warrant telling the employee their profile moved.
PROFILE_CHANGES = {"personal_info", "contact_info"}


def _full_name(first: str, last: str) -> str:
    return f"{first} {last}".strip()


def welcome_new_employee(ctx: HandlerContext, payload: EmployeeCreated):
    name = _full_name(payload.first_name, payload.last_name)
    return ctx.notify(
        NotificationType.EMPLOYEE_WELCOME,
        user_id=payload.employee_id,
        email=payload.email,
        subject=f"Welcome to the company, {payload.first_name}!",
        message=(
            f"Hi {name}, welcome to our HRMS! Your employee ID is "
            f"{payload.employee_id}. Please check your onboarding tasks."
        ),
        data={
            "employee_id": payload.employee_id,
            "first_name": payload.first_name,
            "last_name": payload.last_name,
        },
        source=SOURCE,
    )


def notify_manager_of_new_hire(ctx: HandlerContext, payload: EmployeeCreated):
    if not payload.manager_id:
        return None
    name = _full_name(payload.first_name, payload.last_name)
    return ctx.notify(
        NotificationType.EMPLOYEE_UPDATED,
        user_id=payload.manager_id,
        subject="New Team Member",
        message=(
            f"{name} has joined your team. Please ensure they complete "
            "their onboarding process."
        ),
        data={"employee_id": payload.employee_id, "first_name": payload.first_name},
        source=SOURCE,
    )


def notify_profile_updated(ctx: HandlerContext, payload: EmployeeUpdated):
    if not PROFILE_CHANGES.intersection(payload.changes):
        return None
    return ctx.notify(
        NotificationType.EMPLOYEE_UPDATED,
        channel=Channel.IN_APP,
        user_id=payload.employee_id,
        subject="Profile Updated",
        message="Your profile information has been updated. Please review the changes.",
        data={"changes": list(payload.changes)},
        source=SOURCE,
    )


def notify_hr_of_termination(ctx: HandlerContext, payload: EmployeeTerminated):
    name = _full_name(payload.first_name, payload.last_name)
    return ctx.notify(
        NotificationType.EMPLOYEE_TERMINATED,
        email=ctx.settings.hr_email,
        subject="Employee Termination",
        message=(
            f"{name} (ID: {payload.employee_id}) has been terminated effective "
            f"{payload.termination_date}. Please complete offboarding procedures."
        ),
        data={
            "employee_id": payload.employee_id,
            "termination_date": payload.termination_date,
        },
        source=SOURCE,
    )


def notify_manager_of_departure(ctx: HandlerContext, payload: EmployeeTerminated):
    if not payload.manager_id:
        return None
    name = _full_name(payload.first_name, payload.last_name)
    return ctx.notify(
        NotificationType.EMPLOYEE_TERMINATED,
        user_id=payload.manager_id,
        subject="Team Member Departure",
        message=f"{name} has left the team effective {payload.termination_date}.",
        data={"employee_id": payload.employee_id},
        source=SOURCE,
    )
