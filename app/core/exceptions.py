from typing import Any, Dict, List, Optional

from fastapi import status


class AppointmentServiceError(Exception):
    """Base error rendered by the API as ``{"error": ..., "message": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ValidationFailed(AppointmentServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"

    def __init__(self, details: List[Dict[str, Any]]):
        super().__init__("; ".join(d["msg"] for d in details))
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "details": self.details}


class PatientNotFound(AppointmentServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Patient not found"

    def __init__(self, patient_id: int):
        super().__init__(f"Patient with ID {patient_id} does not exist")
        self.patient_id = patient_id


class SchedulingConflict(AppointmentServiceError):
    status_code = status.HTTP_409_CONFLICT
    error = "Appointment conflict"

    def __init__(self, message: str = "Patient already has an appointment at this date and time"):
        super().__init__(message)


class NotFound(AppointmentServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Appointment not found"

    def __init__(self, appointment_id: str):
        super().__init__(f"Appointment with ID {appointment_id} does not exist")
        self.appointment_id = appointment_id


class StorageError(AppointmentServiceError):
    """Persistence failure; the underlying error is logged, never returned."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"
