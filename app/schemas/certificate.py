# File: app/schemas/certificate.py
from pydantic import BaseModel
from typing import List, Optional, Dict, Any
from datetime import datetime
from app.models.certificate import CertificateType


class Certificate(BaseModel):
    id: str
    type: CertificateType
    user_id: str
    stall_id: Optional[str] = None
    event_id: str
    generated_at: datetime
    certificate_url: Optional[str] = None
    blockchain_hash: Optional[str] = None

    class Config:
        from_attributes = True


class CertificateWithDetails(Certificate):
    event_name: str
    stall_name: Optional[str] = None


class ParticipationCertificateCreate(BaseModel):
    event_id: str
    user_id: str


class StallCertificateResult(BaseModel):
    """Outcome of issuing certificates for one stall"""
    stall_id: str
    stall_name: Optional[str] = None
    created: List[Certificate] = []
    skipped: int = 0
    error: Optional[Dict[str, Any]] = None


class EventCertificateResult(BaseModel):
    """Outcome of a bulk run; failed stalls do not undo the others"""
    event_id: str
    stalls_processed: int
    stalls_failed: int
    certificates_created: int
    results: List[StallCertificateResult] = []
