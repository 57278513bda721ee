from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Customer(BaseModel):
    id: Optional[int] = None
    name: str
    email: str
    age: int


class CustomerRegistrationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    age: int = Field(ge=0, le=150)


class CustomerUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    age: Optional[int] = Field(default=None, ge=0, le=150)


class CustomerOut(BaseModel):
    id: int
    name: str
    email: str
    age: int


class PingPong(BaseModel):
    pingPong: str
