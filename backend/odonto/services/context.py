from __future__ import annotations

from dataclasses import dataclass

DEFAULT_IP = "0.0.0.0"


@dataclass(frozen=True)
class ClinicContext:
    """Identity and tenant a unit of work runs under."""

    clinic_id: str
    user_id: str
    ip_address: str = DEFAULT_IP
    user_email: str | None = None
    request_id: str | None = None

    def __post_init__(self) -> None:
        if not self.clinic_id:
            raise ValueError("clinic_id is required")
        if not self.user_id:
            raise ValueError("user_id is required")
        if not self.ip_address:
            object.__setattr__(self, "ip_address", DEFAULT_IP)
