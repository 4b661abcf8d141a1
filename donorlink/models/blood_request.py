from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

PHONE_PATTERN = r"^\+?[\d\s\-\(\)]{10,15}$"
EMAIL_PATTERN = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"


def future_deadline(value: datetime) -> datetime:
    aware = value if value.tzinfo else value.astimezone()
    if aware <= datetime.now().astimezone():
        raise ValueError("Required by date must be in the future")
    return aware


class BloodGroup(str, Enum):
    a_pos = "A+"
    a_neg = "A-"
    b_pos = "B+"
    b_neg = "B-"
    ab_pos = "AB+"
    ab_neg = "AB-"
    o_pos = "O+"
    o_neg = "O-"


class Urgency(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class RequestStatus(str, Enum):
    active = "active"
    fulfilled = "fulfilled"
    expired = "expired"
    cancelled = "cancelled"


class ResponseStatus(str, Enum):
    interested = "interested"
    confirmed = "confirmed"
    donated = "donated"
    declined = "declined"


class Location(BaseModel):
    coordinates: list[float] = Field(min_length=2, max_length=2)  # [longitude, latitude]
    address: str = Field(min_length=5, max_length=200)
    city: str = Field(min_length=2, max_length=50)
    state: str = Field(min_length=2, max_length=50)

    @field_validator("coordinates")
    @classmethod
    def check_range(cls, value: list[float]) -> list[float]:
        lng, lat = value
        if not -180 <= lng <= 180 or not -90 <= lat <= 90:
            raise ValueError("Location coordinates must be [longitude, latitude]")
        return value


class ContactInfo(BaseModel):
    primary_phone: str = Field(pattern=PHONE_PATTERN)
    alternate_phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)


class DoctorInfo(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    phone: str = Field(pattern=PHONE_PATTERN)
    license: Optional[str] = Field(default=None, max_length=50)


class HospitalInfo(BaseModel):
    name: str = Field(min_length=2, max_length=150)
    address: str = Field(min_length=5, max_length=200)
    phone: str = Field(pattern=PHONE_PATTERN)


class FraudFactor(BaseModel):
    factor: str
    weight: int


class FraudCheck(BaseModel):
    score: int = Field(default=0, ge=0, le=100)
    factors: list[FraudFactor] = []
    is_reviewed: bool = False
    reviewed_by: Optional[str] = None
    review_date: Optional[datetime] = None
    review_notes: Optional[str] = None


class BloodRequestCreate(BaseModel):
    patient_name: str = Field(min_length=2, max_length=100)
    blood_group: BloodGroup
    units_needed: int = Field(ge=1, le=10)
    urgency: Urgency
    hospital: HospitalInfo
    location: Location
    contact_info: ContactInfo
    medical_reason: str = Field(min_length=10, max_length=300)
    doctor_info: DoctorInfo
    required_by: datetime

    @field_validator("patient_name", "medical_reason")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("required_by")
    @classmethod
    def must_be_future(cls, value: datetime) -> datetime:
        return future_deadline(value)


class BloodRequestUpdate(BaseModel):
    urgency: Optional[Urgency] = None
    contact_info: Optional[ContactInfo] = None
    required_by: Optional[datetime] = None
    status: Optional[RequestStatus] = None

    @field_validator("required_by")
    @classmethod
    def must_be_future(cls, value: Optional[datetime]) -> Optional[datetime]:
        return future_deadline(value) if value is not None else value


class DonorResponseCreate(BaseModel):
    message: Optional[str] = Field(default=None, max_length=200)
    status: ResponseStatus

    @field_validator("status")
    @classmethod
    def interested_or_confirmed(cls, value: ResponseStatus) -> ResponseStatus:
        if value not in (ResponseStatus.interested, ResponseStatus.confirmed):
            raise ValueError("Status must be either interested or confirmed")
        return value


class FraudReview(BaseModel):
    is_reviewed: bool
    review_notes: Optional[str] = Field(default=None, max_length=500)


class StatusUpdate(BaseModel):
    status: RequestStatus


class BatchAnalyzeRequest(BaseModel):
    request_ids: list[str] = Field(min_length=1, max_length=100)
