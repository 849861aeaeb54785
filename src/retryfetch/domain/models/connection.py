"""Connectivity report model"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConnectionStatus(str, Enum):
    ONLINE = "online"
    SLOW = "slow"
    OFFLINE = "offline"


@dataclass(frozen=True)
class ConnectionReport:
    """Result of one connectivity check"""

    status: ConnectionStatus
    latency_ms: Optional[float] = None  # None when offline

    @property
    def is_online(self) -> bool:
        return self.status == ConnectionStatus.ONLINE
