from pydantic import BaseModel, Field, field_validator

BCRYPT_MAX_PASSWORD_BYTES = 72


class SignUpRequest(BaseModel):
    username: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str | None = None
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    id: str
    username: str
    name: str
    email: str | None
    profile_picture: str | None
    created_at: str
