# File: app/schemas/dashboard.py
from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_stalls: int = 0
    pending_stalls: int = 0
    approved_stalls: int = 0
    rejected_stalls: int = 0
    total_events: int = 0
    active_events: int = 0
    total_certificates: int = 0
    total_users: int = 0
    total_forms: int = 0
    contact_submissions: int = 0
