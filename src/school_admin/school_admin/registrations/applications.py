"""Typed registration payloads.

A submission is either a StudentApplication or a TeacherApplication. The role
decides the shape, so a student can never carry a subject and a teacher can
never carry a class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..common.validators import optional_text, require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class StudentApplication:
    name: str
    email: str
    class_name: str

    role = Role.STUDENT
    subject = None


@dataclass(frozen=True)
class TeacherApplication:
    name: str
    email: str
    subject: str

    role = Role.TEACHER
    class_name = None


@dataclass(frozen=True)
class AdminApplication:
    """Used when seeding the first admin; never accepted from self-registration."""

    name: str
    email: str

    role = Role.ADMIN
    class_name = None
    subject = None


Application = Union[StudentApplication, TeacherApplication]


def parse_application(payload: Mapping[str, Any]) -> Application:
    """Validate a raw form/JSON mapping. Accepts `class` or `class_name`."""
    name = require_non_empty(payload.get("name"), "Name")
    email = require_email(payload.get("email"))

    role_s = (optional_text(payload.get("role"), "Role") or "").lower()
    class_name = optional_text(payload.get("class") or payload.get("class_name"), "Class")
    subject = optional_text(payload.get("subject"), "Subject")

    if role_s == Role.STUDENT.value:
        if subject:
            raise ValidationError("Students cannot register a subject")
        if not class_name:
            raise ValidationError("Class is required for students")
        return StudentApplication(name=name, email=email, class_name=class_name)

    if role_s == Role.TEACHER.value:
        if class_name:
            raise ValidationError("Teachers cannot register a class")
        if not subject:
            raise ValidationError("Subject is required for teachers")
        return TeacherApplication(name=name, email=email, subject=subject)

    raise ValidationError("Role must be student or teacher")


def metadata_for(source: Any) -> dict:
    """Identity metadata for anything shaped like an application or PendingRequest."""
    out: dict[str, Optional[str]] = {"name": source.name, "role": source.role.value}
    if source.class_name:
        out["class"] = source.class_name
    if source.subject:
        out["subject"] = source.subject
    return out
