from __future__ import annotations

from enum import Enum


class AppRole(str, Enum):
    INVESTOR = "investor"
    ADVISOR = "advisor"
    AUDITOR = "auditor"
    ADMIN = "admin"
    NOVICE = "novice"
