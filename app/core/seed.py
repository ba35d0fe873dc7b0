import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models.patient import Patient

logger = logging.getLogger(__name__)

SAMPLE_PATIENTS = [
    {"name": "John Doe", "email": "john@example.com", "phone": "555-0101"},
    {"name": "Jane Smith", "email": "jane@example.com", "phone": "555-0102"},
    {"name": "Bob Johnson", "email": "bob@example.com", "phone": "555-0103"},
]


def seed_patients(db: Session) -> int:
    """Insert the sample patients if the patients table is empty.

    Returns the number of patients inserted (0 when the table already had rows).
    """
    count = db.scalar(select(func.count()).select_from(Patient))
    if count:
        return 0

    try:
        db.add_all([Patient(**data) for data in SAMPLE_PATIENTS])
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Sample patients added ({len(SAMPLE_PATIENTS)})")
    return len(SAMPLE_PATIENTS)
