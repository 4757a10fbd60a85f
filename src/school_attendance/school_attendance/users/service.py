from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..biometrics.matcher import as_descriptor
from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    role: Role
    student_code: Optional[str]


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hash in the database.
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            student_code=user.student_code,
        )


class StudentService:
    """Use case: administrators manage student accounts."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_student(self, *, full_name: str, username: str, password: str, student_code: str) -> int:
        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        student_code = require_non_empty(student_code, "Student code")
        require_min_length(password, "Password", 6)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")
        if self._users.get_by_student_code(student_code):
            raise ValidationError("Student code already exists")

        user_id = self._users.create_user(
            full_name=full_name,
            username=username,
            password_hash=generate_password_hash(password),
            role=Role.STUDENT,
            student_code=student_code,
        )
        logger.info("Created student %s (user_id=%s)", student_code, user_id)
        return user_id

    def list_students(self, *, active_only: bool = False) -> Sequence[User]:
        return self._users.list_students(active_only=active_only)

    def get_student(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user or not user.is_student:
            raise NotFoundError("Student not found")
        return user

    def set_active(self, user_id: int, *, is_active: bool) -> None:
        self.get_student(user_id)
        self._users.set_active(user_id, is_active=is_active)

    def delete_student(self, user_id: int) -> None:
        self.get_student(user_id)
        if not self._users.delete_by_id(user_id):
            raise NotFoundError("Student not found")
        logger.info("Deleted student user_id=%s", user_id)

    def enroll_face(self, user_id: int, descriptor: Sequence[float]) -> None:
        self.get_student(user_id)
        vec = as_descriptor(descriptor)
        self._users.set_face_descriptor(user_id, [float(x) for x in vec])
        logger.info("Enrolled face descriptor for user_id=%s (size=%d)", user_id, vec.size)

    @staticmethod
    def to_view(user: User) -> dict:
        return {
            "user_id": user.user_id,
            "full_name": user.full_name,
            "username": user.username,
            "student_code": user.student_code,
            "is_active": user.is_active,
            "face_enrolled": user.has_face_enrolled,
        }
