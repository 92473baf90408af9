from typing import Optional
from pydantic import BaseModel, ConfigDict


class ProfileBase(BaseModel):
    age: Optional[int] = None
    max_heart_rate: Optional[int] = None


class ProfileRead(ProfileBase):
    model_config = ConfigDict(from_attributes=True)

    estimated_max_heart_rate: Optional[int] = None  # 220 - age
    resolved_max_heart_rate: int


class ProfileUpsert(ProfileBase):
    pass
