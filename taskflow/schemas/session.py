from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SessionIdentity(BaseModel):
    """Who is calling, resolved once per request from the session cookie."""

    user_id: str
    username: str
    expires_at: datetime

    model_config = ConfigDict(frozen=True, from_attributes=True)
