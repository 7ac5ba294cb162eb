# File: app/schemas/__init__.py
from .auth import TokenData, ActorContext
from .profile import Profile, ProfileSummary, ProfileUpdate
from .event import Event, EventCreate, EventUpdate
from .stall import (
    Stall, StallRegister, StallDecision, StallNumberAssign,
    StallWithEvent, StallWithMembers,
)
from .certificate import (
    Certificate, CertificateWithDetails, ParticipationCertificateCreate,
    StallCertificateResult, EventCertificateResult,
)
from .form import (
    Question, QuestionType, Form, FormCreate, FormUpdate,
    FormResponse, FormResponseCreate,
)
from .contact import ContactSubmission, ContactSubmissionCreate
from .gallery import GalleryItem
from .entrepreneur import EntrepreneurApplication, EntrepreneurApplicationCreate
from .dashboard import DashboardStats
from .communication import Recipient, RecipientScope, BroadcastRequest, BroadcastResult
