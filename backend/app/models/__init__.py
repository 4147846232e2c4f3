from app.models.base import CamelModel
from app.models.vehicle import MainFeature, Vehicle
from app.models.booking import BookingStatus, NormalizedBooking
from app.models.interaction import InteractionAction, InteractionEvent
from app.models.user import Account, Role, UserProfile
from app.models.staff import Staff, StaffAddress
from app.models.showroom import Showroom, ShowroomStatus
from app.models.contact import ContactMessage, ContactSource

__all__ = [
    "CamelModel",
    "MainFeature", "Vehicle",
    "BookingStatus", "NormalizedBooking",
    "InteractionAction", "InteractionEvent",
    "Account", "Role", "UserProfile",
    "Staff", "StaffAddress",
    "Showroom", "ShowroomStatus",
    "ContactMessage", "ContactSource",
]
