"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a Driver (identity, display name, map colour) and their status.
The roster is static for a session; drivers are never created or destroyed at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DriverStatus(str, Enum):
    """
    Standardizes the state a driver can be shown in.
    """
    AVAILABLE = "Available"
    ON_ROUTE = "On Route"
    OFF_DUTY = "Off Duty"


@dataclass(frozen=True)
class Driver:
    """
    A member of the fixed roster.
    `name` is the display name the task store records in its assignedDriver column.
    """
    id: str
    name: str
    display_color: str
    status: DriverStatus = DriverStatus.AVAILABLE

    @classmethod
    def new(
        cls,
        driver_id: str,
        name: str,
        display_color: str,
        status: str | DriverStatus = DriverStatus.AVAILABLE,
    ) -> Driver:
        if isinstance(status, str) and not isinstance(status, DriverStatus):
            status = DriverStatus(status)

        return cls(
            id=driver_id,
            name=name,
            display_color=display_color,
            status=status,
        )
