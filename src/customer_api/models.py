import re
from dataclasses import asdict
from datetime import datetime
from typing import Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email

from .records import Customer

# Digits with an optional leading "+" and space, dash, dot or parenthesis separators
PHONE_PATTERN = re.compile(r"\+?[0-9(][0-9()\-. ]{5,18}[0-9]")
MIN_PHONE_DIGITS = 7


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CustomerIn(CamelModel):
    given_name: str
    middle_initial: Optional[str] = None
    surname: str
    primary_email: str
    contact_number: str

    @field_validator("given_name", "surname", "contact_number")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("primary_email")
    @classmethod
    def email_address(cls, value: str) -> str:
        # The submitted spelling is stored; it only has to normalize to itself.
        _, normalized = validate_email(value)
        if normalized.lower() != value.lower():
            raise ValueError("value is not a valid email address")
        return value

    @field_validator("contact_number")
    @classmethod
    def phone_number(cls, value: str) -> str:
        digits = sum(ch.isdigit() for ch in value)
        if not PHONE_PATTERN.fullmatch(value) or digits < MIN_PHONE_DIGITS:
            raise ValueError("must be a valid phone number")
        return value

    def to_record(self) -> Customer:
        return Customer(
            given_name=self.given_name,
            middle_initial=self.middle_initial,
            surname=self.surname,
            primary_email=self.primary_email,
            contact_number=self.contact_number,
        )


class CustomerOut(CamelModel):
    customer_id: UUID
    given_name: str
    middle_initial: Optional[str]
    surname: str
    primary_email: str
    contact_number: str

    @classmethod
    def from_record(cls, customer: Customer) -> "CustomerOut":
        return cls(**asdict(customer))


class CustomerPageOut(CamelModel):
    content: List[CustomerOut]
    page: int
    size: int
    total_elements: int
    total_pages: int


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: Union[Dict[str, str], str]
    path: str
