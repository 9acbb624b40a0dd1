import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from admin_portal.config import settings

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+[1-9]\d{7,14}$")  # E.164 with country code
STUDENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")
INVITATION_CODE_PATTERN = re.compile(r"^[A-Z0-9]{8,20}$")

PASSWORD_MIN_LENGTH = 8
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72
FULL_NAME_MIN_LENGTH = 2
FULL_NAME_MAX_LENGTH = 100

# Error types below are ErrorCode names; the request validation handler
# turns them back into domain error codes.

def check_password_strength(password: str) -> str:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError("INVALID_PASSWORD", f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise PydanticCustomError("INVALID_PASSWORD", f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")
    if not re.search(r"[a-z]", password):
        raise PydanticCustomError("INVALID_PASSWORD", "Password must contain a lowercase letter")
    if not re.search(r"[A-Z]", password):
        raise PydanticCustomError("INVALID_PASSWORD", "Password must contain an uppercase letter")
    if not re.search(r"\d", password):
        raise PydanticCustomError("INVALID_PASSWORD", "Password must contain a digit")
    if not re.search(r"[^A-Za-z0-9]", password):
        raise PydanticCustomError("INVALID_PASSWORD", "Password must contain a special character")
    return password

def check_phone(phone: str) -> str:
    phone = phone.strip()
    if not PHONE_PATTERN.match(phone):
        raise PydanticCustomError("INVALID_PHONE", "Phone must be in international format, e.g. +919876543210")
    return phone

def check_full_name(full_name: str) -> str:
    full_name = " ".join(full_name.split())
    if not FULL_NAME_MIN_LENGTH <= len(full_name) <= FULL_NAME_MAX_LENGTH:
        raise PydanticCustomError(
            "INVALID_INPUT",
            f"Full name must be between {FULL_NAME_MIN_LENGTH} and {FULL_NAME_MAX_LENGTH} characters",
        )
    return full_name

def check_email_shape(email):
    if isinstance(email, str):
        email = email.strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise PydanticCustomError("INVALID_EMAIL", "Invalid email format")
    return email


class AdminOnboardRequest(BaseModel):
    """Onboarding candidate; everything the core receives has passed these checks."""
    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(alias="studentID")
    full_name: str = Field(alias="fullName")
    email: EmailStr
    password: str
    phone: str
    role_id: int = Field(alias="roleID")
    branch_id: Optional[int] = Field(default=None, alias="branchID")
    graduation_year: int = Field(alias="graduationYear")
    invitation_code: str = Field(alias="invitationCode")

    @field_validator("student_id")
    @classmethod
    def validate_student_id(cls, v: str) -> str:
        v = v.strip()
        if not STUDENT_ID_PATTERN.match(v):
            raise PydanticCustomError("INVALID_INPUT", "Student ID must be 3-20 alphanumeric characters")
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        return check_full_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return check_email_shape(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return check_phone(v)

    @field_validator("role_id", "branch_id")
    @classmethod
    def validate_positive_id(cls, v: Optional[int], info) -> Optional[int]:
        if v is not None and v <= 0:
            raise PydanticCustomError("INVALID_INPUT", "{field} must be a positive integer", {"field": info.field_name})
        return v

    @field_validator("graduation_year")
    @classmethod
    def validate_graduation_year(cls, v: int) -> int:
        if not settings.graduation_year_min <= v <= settings.graduation_year_max:
            raise PydanticCustomError(
                "INVALID_GRADUATION_YEAR",
                "Graduation year must be between {min} and {max}",
                {"min": settings.graduation_year_min, "max": settings.graduation_year_max},
            )
        return v

    @field_validator("invitation_code")
    @classmethod
    def validate_invitation_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not INVITATION_CODE_PATTERN.match(v):
            raise PydanticCustomError("INVALID_INPUT", "Invitation code must be 8-20 uppercase letters or digits")
        return v


class AdminLoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return check_email_shape(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        # Strength is not checked at login
        if not v:
            raise PydanticCustomError("MISSING_FIELD", "Password cannot be empty")
        return v


class AdminPatch(BaseModel):
    """Fields an admin may change on their own profile; None means untouched."""
    model_config = ConfigDict(frozen=True)

    full_name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    old_password: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.full_name or self.phone or self.password)


class AdminUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: Optional[str] = Field(default=None, alias="fullName")
    phone: Optional[str] = None
    password: Optional[str] = None
    old_password: Optional[str] = Field(default=None, alias="oldPassword")

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> Optional[str]:
        return check_full_name(v) if v is not None else v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return check_phone(v) if v is not None else v

    @model_validator(mode="after")
    def validate_patch(self) -> "AdminUpdateRequest":
        if self.password is not None:
            if not self.old_password:
                raise PydanticCustomError("MISSING_FIELD", "Old password is required to set new password")
            check_password_strength(self.password)
        if self.full_name is None and self.phone is None and self.password is None:
            raise PydanticCustomError("INVALID_INPUT", "At least one field (fullName, phone, or password) must be provided")
        return self

    def to_patch(self) -> AdminPatch:
        return AdminPatch(
            full_name=self.full_name,
            phone=self.phone,
            password=self.password,
            old_password=self.old_password,
        )


class AdminResponse(BaseModel):
    """Public admin fields; the password hash is never part of a response."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int = Field(alias="adminID")
    student_id: str = Field(alias="studentID")
    full_name: str = Field(alias="fullName")
    email: str
    phone: str
    role_id: int = Field(alias="roleID")
    branch_id: Optional[int] = Field(default=None, alias="branchID")
    graduation_year: int = Field(alias="graduationYear")
    current_year: int = Field(alias="currentYear")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    type: str = "Bearer"
    expires_at: datetime = Field(alias="expiresAt")


class AdminAuthData(BaseModel):
    admin: AdminResponse
    token: TokenResponse


class AdminAuthResponse(BaseModel):
    success: bool = True
    message: str
    data: AdminAuthData


class AdminData(BaseModel):
    admin: AdminResponse


class AdminUpdateResponse(BaseModel):
    success: bool = True
    message: str
    data: AdminData
