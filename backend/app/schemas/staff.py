"""
Pydantic schemas for staff management.

Derived fields (fullName, age, employeeId, username) are never accepted from
clients; the staff service computes them.
"""

from enum import Enum
from pydantic import Field, field_validator

from app.models.base import CamelModel
from app.models.staff import StaffAddress
from app.schemas.user import EMAIL_PATTERN


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"


class AccessLevel(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    VIEWER = "viewer"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class StaffBase(CamelModel):
    middle_name: str = ""
    gender: Gender = Gender.MALE
    date_of_birth: str = ""
    alternate_contact_number: str = ""
    address: StaffAddress = Field(default_factory=StaffAddress)
    department: str = ""
    date_of_joining: str = ""
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    shift_timing: str = ""
    salary: int = Field(0, ge=0)
    work_location: str = ""
    gov_id_proof_type: str = ""
    gov_id_number: str = ""
    employee_badge_number: str = ""
    access_level: AccessLevel = AccessLevel.STAFF
    status: StaffStatus = StaffStatus.ACTIVE
    emergency_contact_name: str = ""
    emergency_contact_number: str = ""
    relationship_with_employee: str = ""
    blood_group: str = ""
    medical_conditions: str = ""


class StaffCreate(StaffBase):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    contact_number: str = Field(..., min_length=1)
    email_address: str
    role: str = Field(..., min_length=1)

    @field_validator("email_address")
    @classmethod
    def _email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value


class StaffUpdate(StaffCreate):
    """Full replacement of the editable fields; derived fields are recomputed."""
