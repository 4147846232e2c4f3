"""
Staff member record (staff/{id}).

`full_name`, `age`, `employee_id` and `username` are derived by the staff
service on every write; clients cannot set them directly.
"""

from typing import Optional

from pydantic import Field

from app.models.base import CamelModel


class StaffAddress(CamelModel):
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = "India"
    zip_code: str = ""


class Staff(CamelModel):
    id: str
    first_name: str
    middle_name: str = ""
    last_name: str
    full_name: str
    gender: str = "male"
    date_of_birth: str = ""
    age: Optional[int] = None
    contact_number: str
    alternate_contact_number: str = ""
    email_address: str
    address: StaffAddress = Field(default_factory=StaffAddress)
    employee_id: str
    role: str
    department: str = ""
    date_of_joining: str = ""
    employment_type: str = "full-time"
    shift_timing: str = ""
    salary: int = 0
    work_location: str = ""
    gov_id_proof_type: str = ""
    gov_id_number: str = ""
    employee_badge_number: str = ""
    username: str = ""
    access_level: str = "staff"
    status: str = "active"
    emergency_contact_name: str = ""
    emergency_contact_number: str = ""
    relationship_with_employee: str = ""
    blood_group: str = ""
    medical_conditions: str = ""
    created_at: str
    updated_at: str
