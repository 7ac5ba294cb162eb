from .base import Base, BaseModel
from .profile import Profile, ProfileRole
from .event import Event
from .stall import Stall, StallStatus
from .certificate import Certificate, CertificateType
from .form import Form, FormResponse
from .contact_submission import ContactSubmission
from .gallery import GalleryItem
from .entrepreneur import EntrepreneurApplication

__all__ = [
    "Base", "BaseModel",
    "Profile", "ProfileRole",
    "Event",
    "Stall", "StallStatus",
    "Certificate", "CertificateType",
    "Form", "FormResponse",
    "ContactSubmission",
    "GalleryItem",
    "EntrepreneurApplication",
]
