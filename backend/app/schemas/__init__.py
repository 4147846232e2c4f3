from app.schemas.user import (
    AccessResponse, AuthResponse, ProfileUpdate, RoleUpdate, UserCreate, UserLogin,
)
from app.schemas.booking import (
    BookingCancelResponse, BookingCreate, MigrationResponse, PaymentPreference,
)
from app.schemas.vehicle import VehicleCreate, VehicleUpdate
from app.schemas.interaction import InteractionCreate
from app.schemas.staff import StaffCreate, StaffUpdate
from app.schemas.showroom import ShowroomCreate
from app.schemas.contact import ContactCreate, ContactReceived

__all__ = [
    "AccessResponse", "AuthResponse", "ProfileUpdate", "RoleUpdate", "UserCreate", "UserLogin",
    "BookingCancelResponse", "BookingCreate", "MigrationResponse",
    "PaymentPreference",
    "VehicleCreate", "VehicleUpdate",
    "InteractionCreate",
    "StaffCreate", "StaffUpdate",
    "ShowroomCreate",
    "ContactCreate", "ContactReceived",
]
