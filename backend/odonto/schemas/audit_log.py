from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field


class AuditLogOut(BaseModel):
    """One mutation recorded by the gateway, with row snapshots on either side."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    clinic_id: Optional[str] = None
    actor_user_id: Optional[str] = None
    actor_email: Optional[str] = None
    action: str
    entity_type: str
    entity_id: str
    request_id: Optional[str] = None
    ip_address: Optional[str] = None
    before_json: Optional[dict] = None
    after_json: Optional[dict] = None

    @computed_field
    @property
    def changed_fields(self) -> List[str]:
        before = self.before_json or {}
        after = self.after_json or {}
        return sorted(key for key in before.keys() | after.keys() if before.get(key) != after.get(key))
