from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a student or administrator account.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    student_code: Optional[str] = None
    is_active: bool = True
    face_descriptor: Optional[tuple[float, ...]] = None

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @property
    def has_face_enrolled(self) -> bool:
        return bool(self.face_descriptor)
