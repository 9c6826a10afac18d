from __future__ import annotations

import pytest

from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.core.exceptions import ValidationError
from src.school_admin.school_admin.registrations.applications import (
    StudentApplication,
    TeacherApplication,
    metadata_for,
    parse_application,
)


def test_student_payload_becomes_student_application():
    app = parse_application({"name": " Karim ", "email": "Karim@X.com", "role": "student", "class": "6-A"})
    assert isinstance(app, StudentApplication)
    assert app.name == "Karim"
    assert app.email == "karim@x.com"
    assert app.role == Role.STUDENT
    assert app.class_name == "6-A"
    assert app.subject is None


def test_teacher_payload_becomes_teacher_application():
    app = parse_application({"name": "Rahim", "email": "rahim@x.com", "role": "teacher", "subject": "Math"})
    assert isinstance(app, TeacherApplication)
    assert app.subject == "Math"
    assert app.class_name is None


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "email": "a@x.com", "role": "student", "class": "6-A"},
        {"name": "A", "email": "not-an-email", "role": "student", "class": "6-A"},
        {"name": "A", "email": "a@x.com", "role": "admin"},
        {"name": "A", "email": "a@x.com", "role": "parent", "class": "6-A"},
        {"name": "A", "email": "a@x.com", "role": "student"},
        {"name": "A", "email": "a@x.com", "role": "student", "class": "6-A", "subject": "Math"},
        {"name": "A", "email": "a@x.com", "role": "teacher"},
        {"name": "A", "email": "a@x.com", "role": "teacher", "subject": "Math", "class": "6-A"},
    ],
)
def test_invalid_payloads_are_rejected(payload):
    with pytest.raises(ValidationError):
        parse_application(payload)


@pytest.mark.parametrize(
    "payload",
    [
        {"name": 123, "email": "a@x.com", "role": "student", "class": "6-A"},
        {"name": "A", "email": ["a@x.com"], "role": "student", "class": "6-A"},
        {"name": "A", "email": "a@x.com", "role": "student", "class": 6},
        {"name": "A", "email": "a@x.com", "role": "teacher", "subject": {"name": "Math"}},
        {"name": "A", "email": "a@x.com", "role": 1, "class": "6-A"},
    ],
)
def test_non_text_fields_are_validation_errors(payload):
    with pytest.raises(ValidationError):
        parse_application(payload)


def test_non_text_password_is_validation_error():
    from src.school_admin.school_admin.common.validators import require_min_length

    with pytest.raises(ValidationError):
        require_min_length(123456, "Password", 6)


def test_metadata_only_carries_the_field_matching_the_role():
    student = parse_application({"name": "K", "email": "k@x.com", "role": "student", "class_name": "7-B"})
    assert metadata_for(student) == {"name": "K", "role": "student", "class": "7-B"}
