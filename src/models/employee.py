"""
Employee-related Pydantic models

Wire format is camelCase (firstName, createdAt); attribute and column names are
snake_case. Client-supplied id and timestamps are ignored.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models.enums import Department
from utils.validation import (
    NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    INVALID_EMAIL_MESSAGE,
    INVALID_PHONE_MESSAGE,
    CONTROL_CHAR_MESSAGE,
    has_control_chars,
    is_valid_email,
    is_valid_phone,
)

_camel_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)


def _check_text(v: str) -> str:
    if has_control_chars(v):
        raise ValueError(CONTROL_CHAR_MESSAGE)
    return v


def _check_email(v: str) -> str:
    if not is_valid_email(v):
        raise ValueError(INVALID_EMAIL_MESSAGE)
    return v


def _check_phone(v: str) -> str:
    if not is_valid_phone(v):
        raise ValueError(INVALID_PHONE_MESSAGE)
    return v


class EmployeeCreateRequest(BaseModel):
    model_config = _camel_config

    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LENGTH)
    phone: str = Field(..., min_length=1, max_length=PHONE_MAX_LENGTH)
    department: Department

    @field_validator('first_name', 'last_name', 'email', 'phone')
    @classmethod
    def validate_text(cls, v):
        return _check_text(v)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class EmployeeUpdateRequest(BaseModel):
    """Partial update: only fields present in the body are applied"""
    model_config = _camel_config

    first_name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    last_name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    email: Optional[str] = Field(None, min_length=1, max_length=EMAIL_MAX_LENGTH)
    phone: Optional[str] = Field(None, min_length=1, max_length=PHONE_MAX_LENGTH)
    department: Optional[Department] = None

    @field_validator('first_name', 'last_name', 'email', 'phone', 'department', mode='before')
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{to_camel(info.field_name)} cannot be null")
        return v

    @field_validator('first_name', 'last_name', 'email', 'phone')
    @classmethod
    def validate_text(cls, v):
        return _check_text(v)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    department: str
    created_at: datetime
    updated_at: datetime
