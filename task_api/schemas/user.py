import re

from email_validator import EmailNotValidError, validate_email
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and contain at least one "
    "lowercase letter, one uppercase letter, and one digit"
)
INVALID_EMAIL_MESSAGE = "The email address you entered is not valid"


def check_password_policy(password: str) -> bool:
    return (
        len(password) >= 8
        and re.search(r"[a-z]", password) is not None
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"\d", password) is not None
    )


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class UserRegister(BaseModel):
    """
    Registration payload.

    Only the username length is checked here. The password policy and email
    format are checked by the register handler after the uniqueness checks,
    so a taken username or email is reported first.
    """
    username: str = Field(..., description="Unique username, at least 2 characters")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="Password satisfying the complexity policy")

    @field_validator("username")
    @classmethod
    def username_length(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("Your username needs to be at least 2 characters long")
        return value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()


class AuthResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")
    username: str
    email: EmailStr
    token: str
