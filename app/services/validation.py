from typing import Any, Dict, List

from pydantic import ValidationError

from ..core.exceptions import ValidationFailed
from ..schemas.appointment import AppointmentCreate, FIELD_MESSAGES

REQUIRED_FIELDS = list(FIELD_MESSAGES)


def validate_appointment_request(payload: Any) -> AppointmentCreate:
    """Check a raw create-appointment body and return the normalized request.

    Every field is checked; a ``ValidationFailed`` lists one entry per broken
    field, in field order. No storage access happens here.
    """
    if not isinstance(payload, dict):
        payload = {}

    try:
        return AppointmentCreate.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(_build_details(payload, exc)) from None


def _build_details(payload: Dict[str, Any], exc: ValidationError) -> List[Dict[str, Any]]:
    failed = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
    return [
        {
            "type": "field",
            "value": payload.get(field),
            "msg": FIELD_MESSAGES[field],
            "path": field,
            "location": "body",
        }
        for field in REQUIRED_FIELDS
        if field in failed
    ]
