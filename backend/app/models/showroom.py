from enum import Enum

from app.models.base import CamelModel


class ShowroomStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Showroom(CamelModel):
    id: str
    name: str
    address: str
    city: str
    state: str = ""
    phone: str
    email: str = ""
    manager: str = ""
    status: ShowroomStatus = ShowroomStatus.ACTIVE
    created_at: str
