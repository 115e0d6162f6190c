from __future__ import annotations

from typing import Optional, Protocol

from .model import EducationGroup


class EducationGroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[EducationGroup]:
        raise NotImplementedError
