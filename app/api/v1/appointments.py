from fastapi import APIRouter, Body, Depends, Query, status
from typing import Any, List, Optional

from ...api.deps import get_appointment_service
from ...services.appointment_service import AppointmentService
from ...services.validation import validate_appointment_request
from ...schemas.appointment import (
    AppointmentCreated, AppointmentDetail, AppointmentSummary,
    ErrorResponse, ValidationErrorResponse
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.post(
    "",
    response_model=AppointmentCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new appointment",
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Patient not found"},
        409: {"model": ErrorResponse, "description": "Appointment conflict"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)
def create_appointment(
    payload: Any = Body(
        None,
        examples=[{
            "PatientId": 1,
            "AppointmentDate": "2024-12-25",
            "AppointmentTime": "10:30",
            "Reason": "Regular checkup",
        }],
    ),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Validate the request, then book it if the patient exists and the slot is free."""
    appointment_data = validate_appointment_request(payload)
    return service.create_appointment(appointment_data)

@router.get(
    "",
    response_model=List[AppointmentSummary],
    summary="Get all appointments",
    responses={500: {"model": ErrorResponse, "description": "Server error"}},
)
def list_appointments(
    patient_id: Optional[str] = Query(None, alias="patientId", description="Filter by patient ID"),
    appointment_date: Optional[str] = Query(None, alias="date", description="Filter by appointment date"),
    service: AppointmentService = Depends(get_appointment_service)
):
    """List appointments, optionally filtered by patient and/or date."""
    return service.list_appointments(patient_id, appointment_date)

@router.get(
    "/{appointment_id}",
    response_model=AppointmentDetail,
    summary="Get appointment by ID",
    responses={
        404: {"model": ErrorResponse, "description": "Appointment not found"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)
def get_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service)
):
    """Get appointment details including patient contact information."""
    return service.get_appointment(appointment_id)
