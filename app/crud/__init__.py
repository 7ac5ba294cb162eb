from .profile import profile
from .event import event
from .stall import stall
from .certificate import certificate
from .form import form, form_response
from .contact import contact_submission
from .gallery import gallery
from .entrepreneur import entrepreneur_application

__all__ = [
    "profile", "event", "stall", "certificate", "form", "form_response",
    "contact_submission", "gallery", "entrepreneur_application",
]
