from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def create(
        self,
        *,
        profile_id: str,
        name: str,
        email: str,
        role: Role,
        class_name: Optional[str],
        subject: Optional[str],
    ) -> Profile:
        raise NotImplementedError

    def list_by_role(self, *, role: Optional[Role] = None, limit: int = 500) -> Sequence[Profile]:
        raise NotImplementedError
