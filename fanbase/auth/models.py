from pydantic import BaseModel
from typing import Optional

class LoginRequest(BaseModel):
    username: str
    password: str

class AdminUser(BaseModel):
    username: str
    user_id: Optional[int] = None

class LoginResponse(BaseModel):
    success: bool
    user: AdminUser
    token_type: str = "Bearer"
    expires_in: int

class TokenData(BaseModel):
    sub: str
    uid: Optional[int] = None
    exp: Optional[int] = None
