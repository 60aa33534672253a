from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        # bcrypt only looks at the first 72 bytes
        if len(value.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class RegisteredUser(BaseModel):
    id: int
    email: str
    created_at: datetime | None

    model_config = {"from_attributes": True}


class LoginUser(BaseModel):
    id: int
    email: str

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    message: str
    user: RegisteredUser
    token: str


class LoginResponse(BaseModel):
    message: str
    user: LoginUser
    token: str
