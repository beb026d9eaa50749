from pydantic import BaseModel, ConfigDict
from typing import Optional


class ProfileOut(BaseModel):
    username: str = ""
    full_name: str = ""
    phone_number: str = ""
    contact_email: str = ""
    avatar_url: str = ""


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    contact_email: Optional[str] = None
    avatar_url: Optional[str] = None
