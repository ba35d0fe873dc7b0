from datetime import date
from typing import Any, Optional
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INT_PATTERN = re.compile(r"^[+-]?\d+$")

REASON_MAX_LENGTH = 500

# One message per field, reported whatever the cause (missing, wrong type, bad value)
FIELD_MESSAGES = {
    "PatientId": "PatientId must be a positive integer",
    "AppointmentDate": "AppointmentDate must be a valid date (YYYY-MM-DD)",
    "AppointmentTime": "AppointmentTime must be in HH:MM format",
    "Reason": f"Reason must be between 1 and {REASON_MAX_LENGTH} characters",
}


class AppointmentCreate(BaseModel):
    """Normalized create request. Construct through the validation gate."""

    patient_id: int = Field(alias="PatientId")
    appointment_date: date = Field(alias="AppointmentDate")
    appointment_time: str = Field(alias="AppointmentTime")
    reason: str = Field(alias="Reason")

    @field_validator("patient_id", mode="before")
    @classmethod
    def parse_patient_id(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(FIELD_MESSAGES["PatientId"])
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        elif isinstance(value, str) and INT_PATTERN.match(value.strip()):
            value = int(value.strip())
        if not isinstance(value, int) or value < 1:
            raise ValueError(FIELD_MESSAGES["PatientId"])
        return value

    @field_validator("appointment_date", mode="before")
    @classmethod
    def parse_appointment_date(cls, value: Any) -> date:
        if not isinstance(value, str) or not DATE_PATTERN.match(value):
            raise ValueError(FIELD_MESSAGES["AppointmentDate"])
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValueError(FIELD_MESSAGES["AppointmentDate"])

    @field_validator("appointment_time", mode="before")
    @classmethod
    def parse_appointment_time(cls, value: Any) -> str:
        if not isinstance(value, str) or not TIME_PATTERN.match(value):
            raise ValueError(FIELD_MESSAGES["AppointmentTime"])
        hours, minutes = value.split(":")
        return f"{int(hours):02d}:{minutes}"

    @field_validator("reason", mode="before")
    @classmethod
    def trim_reason(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(FIELD_MESSAGES["Reason"])
        value = value.strip()
        if not 1 <= len(value) <= REASON_MAX_LENGTH:
            raise ValueError(FIELD_MESSAGES["Reason"])
        return value


class AppointmentCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    appointment_id: int = Field(alias="AppointmentId")
    patient_id: int = Field(alias="PatientId")
    appointment_date: str = Field(alias="AppointmentDate")
    appointment_time: str = Field(alias="AppointmentTime")
    reason: str = Field(alias="Reason")
    message: str = Field("Appointment created successfully", alias="Message")


class AppointmentSummary(BaseModel):
    """Appointment joined with its patient's display name."""

    model_config = ConfigDict(populate_by_name=True)

    appointment_id: int = Field(alias="AppointmentId")
    patient_id: int = Field(alias="PatientId")
    appointment_date: str = Field(alias="AppointmentDate")
    appointment_time: str = Field(alias="AppointmentTime")
    reason: str = Field(alias="Reason")
    status: str
    patient_name: str = Field(alias="PatientName")


class AppointmentDetail(AppointmentSummary):
    patient_email: Optional[str] = Field(None, alias="PatientEmail")
    patient_phone: Optional[str] = Field(None, alias="PatientPhone")


class ErrorResponse(BaseModel):
    error: str
    message: str


class ValidationErrorResponse(BaseModel):
    error: str = "Validation failed"
    details: list
