from pydantic import BaseModel, Field, AwareDatetime, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Any


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Zero value of a timestamp; rejected the same way an empty string is
ZERO_TIMESTAMP = datetime(1, 1, 1, tzinfo=timezone.utc)


class Transaction(BaseModel):
    """Wire representation of a transaction; all fields required and non-zero"""
    date_time: AwareDatetime
    cents_amount: StrictInt = Field(ge=INT64_MIN, le=INT64_MAX)
    currency_code: StrictStr = Field(min_length=1)
    reference: StrictStr = Field(min_length=1)
    merchant_name: StrictStr = Field(min_length=1)
    merchant_city: StrictStr = Field(min_length=1)
    merchant_country_code: StrictStr = Field(min_length=1)
    merchant_country_name: StrictStr = Field(min_length=1)
    merchant_category_code: StrictStr = Field(min_length=1)
    merchant_category_name: StrictStr = Field(min_length=1)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("date_time", mode="before")
    @classmethod
    def date_time_is_string(cls, value: Any) -> Any:
        # Timestamps arrive as RFC 3339 strings only, never epoch numbers
        if not isinstance(value, (str, datetime)):
            raise ValueError("Input should be an RFC 3339 timestamp string")
        if isinstance(value, str) and value.strip().lstrip("+-").replace(".", "", 1).isdigit():
            raise ValueError("Input should be an RFC 3339 timestamp string")
        return value

    @field_validator("date_time")
    @classmethod
    def date_time_not_zero(cls, value: datetime) -> datetime:
        try:
            value = value.astimezone(timezone.utc)
        except OverflowError:
            raise ValueError("timestamp out of range")
        if value == ZERO_TIMESTAMP:
            raise ValueError("value must be non-zero")
        return value

    @field_validator("cents_amount")
    @classmethod
    def cents_amount_not_zero(cls, value: int) -> int:
        if value == 0:
            raise ValueError("value must be non-zero")
        return value
