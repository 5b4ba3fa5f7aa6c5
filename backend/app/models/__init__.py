from app.models.announcement import Announcement
from app.models.assignment import TenantAssignment
from app.models.house import House
from app.models.maintenance import MaintenanceRequest
from app.models.payment import RentPayment
from app.models.profile import Profile

__all__ = ["House", "Profile", "TenantAssignment", "RentPayment", "MaintenanceRequest", "Announcement"]
