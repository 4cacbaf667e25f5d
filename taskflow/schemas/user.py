from pydantic import BaseModel, ConfigDict
from typing import Optional

# Fields are optional so that missing ones reach the service and get a
# readable error instead of a schema dump. Emails are kept exactly as typed.

class UserCreate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class UserResponse(BaseModel):
    id: str
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)

class AuthResponse(BaseModel):
    message: str
    user: UserResponse

class MessageResponse(BaseModel):
    message: str
