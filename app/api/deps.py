from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..services.appointment_service import AppointmentService


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Appointment service bound to the request's database session."""
    return AppointmentService(db)
