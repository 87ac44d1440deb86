from pydantic import BaseModel, Field, StrictStr, field_validator, validate_email


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)
    password: StrictStr = Field(..., min_length=1)

    # Checked like EmailStr, but stored exactly as typed so that login can
    # match the same string
    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        validate_email(v)
        return v


class UserCreated(BaseModel):
    message: str
    id: int


class LoginRequest(BaseModel):
    email_or_username: str = Field(..., alias="emailOrUsername", min_length=1)
    password: StrictStr = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class LoginResponse(BaseModel):
    message: str
    token: str


class TokenData(BaseModel):
    id: int
    username: str | None = None


class Message(BaseModel):
    message: str
