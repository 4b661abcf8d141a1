from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime
from enum import Enum

from donorlink.models.blood_request import BloodGroup, Location, PHONE_PATTERN, EMAIL_PATTERN


class Role(str, Enum):
    donor = "donor"
    requester = "requester"
    admin = "admin"


class UserCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: str = Field(pattern=PHONE_PATTERN)
    role: Role = Role.donor
    blood_group: Optional[BloodGroup] = None
    location: Location
    medical_history: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def donors_need_blood_group(self):
        if self.role == Role.admin:
            raise ValueError("Role must be either donor or requester")
        if self.role == Role.donor and self.blood_group is None:
            raise ValueError("Blood group is required for donors")
        if self.role != Role.donor:
            self.blood_group = None
        return self


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    location: Optional[Location] = None
    is_available: Optional[bool] = None
    last_donation: Optional[datetime] = None
    medical_history: Optional[str] = Field(default=None, max_length=500)


class VerifyUser(BaseModel):
    is_verified: bool
