from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # One booking per patient per slot
        UniqueConstraint(
            "patient_id", "appointment_date", "appointment_time",
            name="uq_appointments_patient_slot"
        ),
        {"sqlite_autoincrement": True},
    )
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Relationships
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    
    # Appointment details, stored as YYYY-MM-DD and HH:MM text
    appointment_date = Column(String(10), nullable=False, index=True)
    appointment_time = Column(String(5), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(
        SQLEnum(
            AppointmentStatus,
            native_enum=False,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        server_default=AppointmentStatus.SCHEDULED.value,
    )
    
    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    
    # Relationships
    patient = relationship("Patient", back_populates="appointments")
    
    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, date='{self.appointment_date}', time='{self.appointment_time}')>"
