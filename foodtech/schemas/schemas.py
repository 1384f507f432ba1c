"""Pydantic schemas for API request/response serialization."""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict, Any
from datetime import date, datetime

from foodtech.models.kb import KBCategory, KBStatus, KBIndexStatus


# ---- Auth ----
class LoginRequest(BaseModel):
    email: str = Field(..., min_length=4)
    password: str = Field(..., min_length=4)

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[Dict[str, Any]] = None

class SetPasswordRequest(BaseModel):
    token: str
    password: str = Field(..., min_length=6)


# ---- Profile ----
class ProfileOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Navigation ----
class NavEntryOut(BaseModel):
    id: str
    label: str
    icon: str
    path: str
    active: bool

class NavigationResponse(BaseModel):
    entries: List[NavEntryOut] = []
    active_id: Optional[str] = None


# ---- Attachments ----
class AttachmentOut(BaseModel):
    id: int
    request_id: Optional[int] = None
    invoice_id: Optional[int] = None
    event_id: Optional[int] = None
    file_name: str
    file_path: str
    file_type: str
    file_size: int
    uploaded_by: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UploadResult(BaseModel):
    file_name: str
    success: bool
    attachment: Optional[AttachmentOut] = None
    error: Optional[str] = None

class UploadBatchResponse(BaseModel):
    uploaded: int
    failed: int
    results: List[UploadResult]

class SignedUrlResponse(BaseModel):
    url: str
    expires_in: int = 3600


# ---- Analytics ----
class UserActivityOut(BaseModel):
    user_id: int
    email: str
    name: str
    role: str
    rd_events_count: int
    purchase_requests_count: int
    purchase_invoices_count: int
    events_count: int
    last_activity_at: Optional[str] = None

class TimelinePointOut(BaseModel):
    date: str
    rd_events: int
    purchase_events: int
    total: int

class MostActiveUser(BaseModel):
    name: str
    events_count: int

class ActivitySummaryOut(BaseModel):
    active_users_count: int
    total_users_count: int
    total_events_count: int
    most_active_user: Optional[MostActiveUser] = None


# ---- Lab / pilot results ----
class LabResultsIn(BaseModel):
    bulk_density_g_dm3: Optional[float] = None
    appearance: Optional[str] = None
    color: Optional[str] = None
    smell: Optional[str] = None
    taste: Optional[str] = None
    chlorides_pct: Optional[float] = None
    phosphates_pct: Optional[float] = None
    moisture_pct: Optional[float] = None
    ph_value: Optional[float] = None
    hydration: Optional[str] = None
    gel_strength_g_cm3: Optional[float] = None
    viscosity_cps: Optional[float] = None
    colority: Optional[float] = None
    additional_info: Optional[str] = None

class LabResultsOut(LabResultsIn):
    id: int
    sample_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PilotResultsIn(BaseModel):
    tasting_sheet_no: Optional[str] = None
    tasting_date: Optional[date] = None
    direction: Optional[str] = None
    tasting_goal: Optional[str] = None
    score_appearance: Optional[int] = Field(None, ge=1, le=10)
    score_color: Optional[int] = Field(None, ge=1, le=10)
    score_aroma: Optional[int] = Field(None, ge=1, le=10)
    score_taste: Optional[int] = Field(None, ge=1, le=10)
    score_consistency: Optional[int] = Field(None, ge=1, le=10)
    score_juiciness: Optional[int] = Field(None, ge=1, le=10)
    score_break_moisture: Optional[int] = Field(None, ge=1, le=10)
    score_syneresis: Optional[int] = Field(None, ge=1, le=10)
    score_curl_formation: Optional[int] = Field(None, ge=1, le=10)
    score_cut_pattern: Optional[int] = Field(None, ge=1, le=10)
    score_fibers: Optional[int] = Field(None, ge=1, le=10)
    score_structure_density: Optional[int] = Field(None, ge=1, le=10)
    score_air_inclusions: Optional[int] = Field(None, ge=1, le=10)
    score_overall: Optional[int] = Field(None, ge=1, le=10)
    comment: Optional[str] = None

class PilotResultsOut(PilotResultsIn):
    id: int
    sample_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ValidationResult(BaseModel):
    is_valid: bool
    error_message: Optional[str] = None


# ---- Workflow procedures ----
class TestingResultRequest(BaseModel):
    result: str = Field(..., min_length=1)
    comment: Optional[str] = None

class DeclineRequest(BaseModel):
    reason: str = Field(..., min_length=1)

class NotificationEventRequest(BaseModel):
    event_type: str = Field(..., min_length=1)
    payload: Dict[str, Any] = {}
    event_id: Optional[str] = None
    recipient_profile_ids: Optional[List[int]] = None

class ProcedureResult(BaseModel):
    success: bool = True
    result: Optional[Any] = None


# ---- Knowledge base ----
class KBDocumentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    category: KBCategory
    version: Optional[str] = None
    status: KBStatus = KBStatus.active
    access_level: str = "open"
    raw_text: Optional[str] = None

class KBDocumentUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[KBCategory] = None
    version: Optional[str] = None
    status: Optional[KBStatus] = None
    access_level: Optional[str] = None
    raw_text: Optional[str] = None

class KBDocumentOut(BaseModel):
    id: int
    title: str
    category: KBCategory
    version: Optional[str] = None
    status: KBStatus
    access_level: str
    storage_bucket: Optional[str] = None
    storage_path: Optional[str] = None
    mime_type: Optional[str] = None
    raw_text: Optional[str] = None
    index_status: KBIndexStatus
    indexed_at: Optional[datetime] = None
    index_error: Optional[str] = None
    created_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Admin handlers ----
class CreateUserRequest(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)

class ImportUserRecord(BaseModel):
    email: str
    name: Optional[str] = None
    role: Optional[str] = None

class ImportUsersRequest(BaseModel):
    users: List[ImportUserRecord] = Field(..., min_length=1)
    send_invites: bool = True

class ImportUserResult(BaseModel):
    email: str
    success: bool
    error: Optional[str] = None

class ImportUsersResponse(BaseModel):
    success: bool = True
    imported: int
    failed: int
    results: List[ImportUserResult]

class ResetPasswordRequest(BaseModel):
    user_id: int

class UpdateRoleRequest(BaseModel):
    user_id: int
    new_role: str = Field(..., min_length=1)

class TriggerIngestRequest(BaseModel):
    document_id: int

class UserAuthInfo(BaseModel):
    id: int
    email: str
    confirmed_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
    has_logged_in: bool
    created_at: Optional[datetime] = None

class UsersAuthInfoResponse(BaseModel):
    users: List[UserAuthInfo]


# ---- Generic ----
class MessageResponse(BaseModel):
    message: str
    detail: Optional[Any] = None
