import pytest
from datetime import date

from app.core.exceptions import ValidationFailed
from app.services.validation import validate_appointment_request

valid_appointment = {
    "PatientId": 1,
    "AppointmentDate": "2024-12-25",
    "AppointmentTime": "10:30",
    "Reason": "Regular checkup"
}


def failed_paths(payload):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_appointment_request(payload)
    return [detail["path"] for detail in exc_info.value.details]


class TestValidationGate:

    def test_valid_request_is_normalized(self):
        """Test that a valid request comes back with parsed types."""
        result = validate_appointment_request({
            "PatientId": "3",
            "AppointmentDate": "2024-02-29",
            "AppointmentTime": "9:05",
            "Reason": "  Follow-up visit  "
        })

        assert result.patient_id == 3
        assert result.appointment_date == date(2024, 2, 29)
        assert result.appointment_time == "09:05"
        assert result.reason == "Follow-up visit"

    def test_empty_body_reports_every_field(self):
        """Test that all four missing fields are reported, in order."""
        assert failed_paths({}) == [
            "PatientId", "AppointmentDate", "AppointmentTime", "Reason"
        ]

    def test_non_object_body_reports_every_field(self):
        """Test that a JSON array or scalar body fails on every field."""
        assert len(failed_paths(["not", "an", "object"])) == 4
        assert len(failed_paths(None)) == 4

    def test_failures_accumulate(self):
        """Test that several bad fields are all reported, not just the first."""
        payload = dict(valid_appointment, PatientId=0, Reason="   ")
        assert failed_paths(payload) == ["PatientId", "Reason"]

    def test_detail_shape(self):
        """Test the structure of a validation failure entry."""
        with pytest.raises(ValidationFailed) as exc_info:
            validate_appointment_request(dict(valid_appointment, AppointmentTime="25:00"))

        assert exc_info.value.details == [{
            "type": "field",
            "value": "25:00",
            "msg": "AppointmentTime must be in HH:MM format",
            "path": "AppointmentTime",
            "location": "body",
        }]
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("patient_id", [0, -1, "abc", "1.5", 1.5, True, None, [1]])
    def test_invalid_patient_id(self, patient_id):
        """Test that PatientId must be an integer of at least 1."""
        assert failed_paths(dict(valid_appointment, PatientId=patient_id)) == ["PatientId"]

    @pytest.mark.parametrize("patient_id, expected", [(1, 1), ("42", 42), (" 7 ", 7), (2.0, 2)])
    def test_patient_id_parsing(self, patient_id, expected):
        """Test that integer-like PatientId values are accepted."""
        result = validate_appointment_request(dict(valid_appointment, PatientId=patient_id))
        assert result.patient_id == expected

    @pytest.mark.parametrize("appointment_date", [
        "2024-02-30", "2023-02-29", "2024/12/25", "24-12-25", "2024-12-25T10:30", "", 20241225
    ])
    def test_invalid_date(self, appointment_date):
        """Test that AppointmentDate must be a real YYYY-MM-DD date."""
        payload = dict(valid_appointment, AppointmentDate=appointment_date)
        assert failed_paths(payload) == ["AppointmentDate"]

    @pytest.mark.parametrize("appointment_time", [
        "24:00", "12:60", "1230", "12:3", "12:30:00", "ab:cd", "", 1030
    ])
    def test_invalid_time(self, appointment_time):
        """Test that AppointmentTime must match HH:MM."""
        payload = dict(valid_appointment, AppointmentTime=appointment_time)
        assert failed_paths(payload) == ["AppointmentTime"]

    @pytest.mark.parametrize("appointment_time, expected", [
        ("00:00", "00:00"), ("23:59", "23:59"), ("7:15", "07:15"), ("09:45", "09:45")
    ])
    def test_time_is_zero_padded(self, appointment_time, expected):
        """Test that accepted times are stored as zero-padded HH:MM."""
        result = validate_appointment_request(dict(valid_appointment, AppointmentTime=appointment_time))
        assert result.appointment_time == expected

    @pytest.mark.parametrize("reason", ["", "   ", "x" * 501, 42, None])
    def test_invalid_reason(self, reason):
        """Test that Reason must be 1-500 characters after trimming."""
        assert failed_paths(dict(valid_appointment, Reason=reason)) == ["Reason"]

    def test_reason_length_counts_after_trim(self):
        """Test that surrounding whitespace does not count towards the limit."""
        reason = "  " + "x" * 500 + "  "
        result = validate_appointment_request(dict(valid_appointment, Reason=reason))
        assert result.reason == "x" * 500
