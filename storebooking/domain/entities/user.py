from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    CLIENT = "client"
    PROVIDER = "provider"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    role: UserRole
