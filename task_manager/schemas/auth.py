"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_identity(cls, value):
        """Trim names and emails. Passwords are kept verbatim."""
        return value.strip() if isinstance(value, str) else value


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        """Trim the email. The password is kept verbatim."""
        return value.strip() if isinstance(value, str) else value


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class RegisterResponse(BaseModel):
    """Registration response with the new user and a token."""

    message: str = "User registered successfully"
    user: UserResponse
    token: str


class LoginResponse(BaseModel):
    """Login response carrying a fresh token."""

    message: str = "Login successful"
    token: str
