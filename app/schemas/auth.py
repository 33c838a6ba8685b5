from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        """Limpia espacios en blanco del usuario."""
        return v.strip()


class LoginResponse(BaseModel):
    token: str
    username: str
