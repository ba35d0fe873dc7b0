from sqlalchemy import String, cast, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..models.appointment import Appointment, AppointmentStatus
from ..models.patient import Patient
from ..core.exceptions import (
    NotFound, PatientNotFound, SchedulingConflict, StorageError
)
from ..schemas.appointment import (
    AppointmentCreate, AppointmentCreated, AppointmentDetail, AppointmentSummary
)

logger = logging.getLogger(__name__)

# Largest id an INTEGER primary key can hold
MAX_STORAGE_ID = 2 ** 63 - 1


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def create_appointment(self, data: AppointmentCreate) -> AppointmentCreated:
        """Book a validated request: patient check, conflict check, insert.

        Stops at the first failure; nothing is written unless both checks pass.
        A slot taken by a concurrent request between the check and the insert
        is rejected by the unique constraint and reported as a conflict.
        """
        appointment_date = data.appointment_date.isoformat()

        try:
            if not self._patient_exists(data.patient_id):
                logger.info(f"Rejected appointment: patient {data.patient_id} not found")
                raise PatientNotFound(data.patient_id)

            if self._slot_taken(data.patient_id, appointment_date, data.appointment_time):
                logger.info(
                    f"Rejected appointment: patient {data.patient_id} already booked "
                    f"at {appointment_date} {data.appointment_time}"
                )
                raise SchedulingConflict()

            appointment = Appointment(
                patient_id=data.patient_id,
                appointment_date=appointment_date,
                appointment_time=data.appointment_time,
                reason=data.reason,
                status=AppointmentStatus.SCHEDULED,
            )
            self.db.add(appointment)

            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                self._classify_rejected_insert(data.patient_id, appointment_date, data.appointment_time)

            appointment_id = appointment.id
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error creating appointment")
            raise StorageError("Failed to create appointment")

        logger.info(f"Created appointment {appointment_id} for patient {data.patient_id}")

        return AppointmentCreated(
            appointment_id=appointment_id,
            patient_id=data.patient_id,
            appointment_date=appointment_date,
            appointment_time=data.appointment_time,
            reason=data.reason,
        )

    def list_appointments(
        self,
        patient_id: Optional[str] = None,
        appointment_date: Optional[str] = None
    ) -> List[AppointmentSummary]:
        """List appointments with patient names, ordered by date then time."""
        query = self._joined_query(Patient.name)

        # Filters are exact matches; an empty value means no constraint
        if patient_id:
            query = query.where(cast(Appointment.patient_id, String) == patient_id)
        if appointment_date:
            query = query.where(Appointment.appointment_date == appointment_date)

        query = query.order_by(Appointment.appointment_date, Appointment.appointment_time)

        try:
            rows = self.db.execute(query).all()
        except SQLAlchemyError:
            logger.exception("Error fetching appointments")
            raise StorageError("Failed to fetch appointments")

        return [
            AppointmentSummary(
                appointment_id=appointment.id,
                patient_id=appointment.patient_id,
                appointment_date=appointment.appointment_date,
                appointment_time=appointment.appointment_time,
                reason=appointment.reason,
                status=_status_value(appointment.status),
                patient_name=name,
            )
            for appointment, name in rows
        ]

    def get_appointment(self, appointment_id: str) -> AppointmentDetail:
        """Fetch one appointment with patient contact details.

        The identifier is matched as text against the stored id, so any value
        that is not an existing id (``"abc"`` included) is simply not found.
        """
        query = self._joined_query(Patient.name, Patient.email, Patient.phone).where(
            cast(Appointment.id, String) == appointment_id
        )

        try:
            row = self.db.execute(query).first()
        except SQLAlchemyError:
            logger.exception("Error fetching appointment")
            raise StorageError("Failed to fetch appointment")

        if row is None:
            raise NotFound(appointment_id)

        appointment, name, email, phone = row
        return AppointmentDetail(
            appointment_id=appointment.id,
            patient_id=appointment.patient_id,
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            reason=appointment.reason,
            status=_status_value(appointment.status),
            patient_name=name,
            patient_email=email,
            patient_phone=phone,
        )

    def _patient_exists(self, patient_id: int) -> bool:
        if patient_id > MAX_STORAGE_ID:
            return False
        return self.db.scalar(
            select(Patient.id).where(Patient.id == patient_id)
        ) is not None

    def _slot_taken(self, patient_id: int, appointment_date: str, appointment_time: str) -> bool:
        return self.db.scalar(
            select(Appointment.id).where(
                Appointment.patient_id == patient_id,
                Appointment.appointment_date == appointment_date,
                Appointment.appointment_time == appointment_time,
            ).limit(1)
        ) is not None

    def _classify_rejected_insert(self, patient_id: int, appointment_date: str, appointment_time: str):
        """Turn a constraint violation on insert into the matching rejection."""
        if self._slot_taken(patient_id, appointment_date, appointment_time):
            logger.info(
                f"Rejected appointment: slot {appointment_date} {appointment_time} "
                f"for patient {patient_id} booked concurrently"
            )
            raise SchedulingConflict()
        if not self._patient_exists(patient_id):
            logger.info(f"Rejected appointment: patient {patient_id} removed before insert")
            raise PatientNotFound(patient_id)
        logger.error(f"Insert for patient {patient_id} violated an unexpected constraint")
        raise StorageError("Failed to create appointment")

    def _joined_query(self, *patient_columns):
        return select(Appointment, *patient_columns).join(
            Patient, Appointment.patient_id == Patient.id
        )


def _status_value(status) -> str:
    return status.value if isinstance(status, AppointmentStatus) else status
