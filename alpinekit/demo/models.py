"""Pydantic models and sample data for the demo forms page."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^\+?[0-9 ()\-.]{7,20}$"

ContactMethod = Literal["email", "phone", "sms"]

# Optional fields where an empty form value means "not given"
_BLANK_AS_NONE = (
    "phone",
    "preferred_contact_date",
    "project_start_date",
    "project_end_date",
    "department",
    "service_rating",
)


class ContactForm(BaseModel):
    """A submitted contact form."""

    first_name: str = Field(..., min_length=1, title="First Name")
    last_name: str = Field(..., min_length=1, title="Last Name")
    email: str = Field(..., pattern=EMAIL_PATTERN, title="Email Address")
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN, title="Phone Number")
    preferred_contact_date: date | None = Field(default=None, title="Preferred Contact Date")
    project_start_date: date | None = Field(default=None, title="Project Start Date")
    project_end_date: date | None = Field(default=None, title="Project End Date")
    department: str | None = Field(default=None, title="Department")
    interested_services: list[str] = Field(default_factory=list, title="Services of Interest")
    team_members: list[str] = Field(default_factory=list, title="Team Members")
    message: str = Field(..., min_length=10, max_length=500, title="Message")
    subscribe_to_newsletter: bool = Field(default=False, title="Subscribe to Newsletter")
    agree_to_terms: bool = Field(..., title="I agree to the terms and conditions")
    preferred_contact_method: ContactMethod = Field(default="email", title="Preferred Contact Method")
    service_rating: int | None = Field(default=None, ge=1, le=5, title="Service Rating")

    @field_validator(*_BLANK_AS_NONE, mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty form inputs as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("first_name", "last_name", "email", "message", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("agree_to_terms")
    @classmethod
    def require_agreement(cls, v: bool) -> bool:
        if not v:
            raise ValueError("You must agree to the terms and conditions")
        return v

    @model_validator(mode="after")
    def validate_project_dates(self) -> ContactForm:
        """Validate the project doesn't end before it starts."""
        if (
            self.project_start_date is not None
            and self.project_end_date is not None
            and self.project_end_date < self.project_start_date
        ):
            raise ValueError("Project end date cannot be before the start date")
        return self


class UserInfo(BaseModel):
    id: int
    name: str
    email: str
    status: str
    role: str
    join_date: date


class CountryOption(BaseModel):
    value: str = ""
    text: str = ""


class DepartmentOption(BaseModel):
    value: str = ""
    text: str = ""


class ServiceOption(BaseModel):
    value: str = ""
    text: str = ""


@dataclass
class FormsViewModel:
    """Everything the forms page template binds to.

    ``form`` holds the current field values (the initial draft or the last
    submission) keyed by ``ContactForm`` field name.
    """

    form: dict[str, Any]
    users: list[UserInfo]
    countries: list[CountryOption]
    departments: list[DepartmentOption]
    services: list[ServiceOption]
    current_user_id: int = 123
    tenant_id: str = "tenant-456"
    errors: dict[str, str] = field(default_factory=dict)


def default_form_values(today: date | None = None) -> dict[str, Any]:
    """Initial draft shown on first load."""
    today = today or datetime.now().date()
    return {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@example.com",
        "preferred_contact_date": today + timedelta(days=7),
        "subscribe_to_newsletter": True,
        "preferred_contact_method": "email",
        "interested_services": [],
        "team_members": [],
    }


def _months_ago(today: date, months: int) -> date:
    return today - timedelta(days=30 * months)


def build_forms_view_model(
    form: dict[str, Any] | None = None, today: date | None = None
) -> FormsViewModel:
    """Build the forms page view model with the sample option data.

    Parameters
    ----------
    form : dict, optional
        Current field values; the default draft when omitted.
    today : date, optional
        Reference date for the sample dates.

    Returns
    -------
    FormsViewModel
    """
    today = today or datetime.now().date()
    users = [
        UserInfo(id=1, name="Alice Johnson", email="alice@example.com", status="Active",
                 role="Administrator", join_date=_months_ago(today, 6)),
        UserInfo(id=2, name="Bob Smith", email="bob@example.com", status="Inactive",
                 role="User", join_date=_months_ago(today, 12)),
        UserInfo(id=3, name="Carol Williams", email="carol@example.com", status="Active",
                 role="Moderator", join_date=_months_ago(today, 3)),
        UserInfo(id=4, name="David Brown", email="david@example.com", status="Active",
                 role="User", join_date=_months_ago(today, 8)),
        UserInfo(id=5, name="Emma Davis", email="emma@example.com", status="Pending",
                 role="User", join_date=today - timedelta(days=15)),
        UserInfo(id=6, name="Frank Wilson", email="frank@example.com", status="Active",
                 role="User", join_date=_months_ago(today, 2)),
    ]  # fmt: skip
    countries = [
        CountryOption(value="us", text="United States"),
        CountryOption(value="uk", text="United Kingdom"),
        CountryOption(value="ca", text="Canada"),
        CountryOption(value="au", text="Australia"),
        CountryOption(value="de", text="Germany"),
        CountryOption(value="fr", text="France"),
    ]
    departments = [
        DepartmentOption(value="engineering", text="Engineering"),
        DepartmentOption(value="marketing", text="Marketing"),
        DepartmentOption(value="sales", text="Sales"),
        DepartmentOption(value="support", text="Customer Support"),
        DepartmentOption(value="hr", text="Human Resources"),
    ]
    services = [
        ServiceOption(value="consulting", text="Consulting"),
        ServiceOption(value="development", text="Software Development"),
        ServiceOption(value="design", text="UI/UX Design"),
        ServiceOption(value="testing", text="Quality Assurance"),
        ServiceOption(value="devops", text="DevOps & Infrastructure"),
        ServiceOption(value="training", text="Training & Support"),
    ]
    return FormsViewModel(
        form=form if form is not None else default_form_values(today),
        users=users,
        countries=countries,
        departments=departments,
        services=services,
    )
