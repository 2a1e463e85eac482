from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

class PublicUser(BaseModel):
    """User as exposed over the API: never carries the stored credential."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    display_name: str
    role: str
    created_at: Optional[datetime] = None
