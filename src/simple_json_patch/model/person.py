from typing import Optional
from pydantic import Field, ConfigDict

from simple_json_patch.etc.enums import PhoneNumberType
from .base import JsonModel


class Address(JsonModel):
    """
    A postal address.
    """

    model_config = ConfigDict(
        extra='forbid',
        serialize_by_alias=True,
    )

    street: Optional[str] = Field(
        default=None,
        alias='Street',
        description='Street name and number',
    )
    city: Optional[str] = Field(
        default=None,
        alias='City',
        description='City or town',
    )
    state: Optional[str] = Field(
        default=None,
        alias='State',
        description='State or region code',
    )
    zip_code: Optional[str] = Field(
        default=None,
        alias='ZipCode',
        description='Postal code',
    )


class PhoneNumber(JsonModel):
    """
    A phone number with its kind.
    """

    model_config = ConfigDict(
        extra='forbid',
        serialize_by_alias=True,
    )

    number: Optional[str] = Field(
        default=None,
        alias='Number',
        description='The phone number as dialled',
    )
    type: PhoneNumberType = Field(
        default=PhoneNumberType.MOBILE,
        alias='Type',
        description='The kind of phone number',
    )


class Person(JsonModel):
    """
    A contact record, used to demonstrate patching typed objects.
    """

    model_config = ConfigDict(
        extra='forbid',
        serialize_by_alias=True,
    )

    first_name: Optional[str] = Field(
        default=None,
        alias='FirstName',
        description='Given name',
    )
    last_name: Optional[str] = Field(
        default=None,
        alias='LastName',
        description='Family name',
    )
    email: Optional[str] = Field(
        default=None,
        alias='Email',
        description='E-mail address',
    )
    address: Optional[Address] = Field(
        default=None,
        alias='Address',
        description='Postal address',
    )
    phone_numbers: list[PhoneNumber] = Field(
        default_factory=list,
        alias='PhoneNumbers',
        description='Known phone numbers, in order of preference',
    )
