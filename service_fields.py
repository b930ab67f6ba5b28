"""Field declarations and value types for Simple Pay services.

A service class declares an ordered list of :class:`Field` objects. Each
field knows the name used in Python (``account_id``), the name the gateway
expects (``amazonPaymentsAccountId``), whether it is required, an optional
default and an optional value type that coerces user input into the string
format Simple Pay accepts.
"""

from __future__ import annotations

import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import pytz

import config
from errors import ConfigurationError, InvalidFieldValueError
from form_helper import tag


class Amount:
    """A currency amount rendered as ``"USD 10.00"``."""

    DEFAULT_CURRENCY = "USD"

    def __init__(self, value: Any, currency: str | None = None) -> None:
        if isinstance(value, Amount):
            self.amount = value.amount
            self.currency = currency or value.currency
            return
        if isinstance(value, bool):
            raise InvalidFieldValueError(f"invalid amount: {value!r}")

        parsed_currency = None
        if isinstance(value, str):
            parts = value.split()
            if len(parts) == 2:
                parsed_currency, value = parts
            elif len(parts) == 1:
                value = parts[0]
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise InvalidFieldValueError(f"invalid amount: {value!r}") from None
        if not amount.is_finite() or amount < 0:
            raise InvalidFieldValueError(f"amount must be a non-negative number: {value!r}")

        # "-0" is not negative but must not render as "-0.00"
        self.amount = abs(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        self.currency = (currency or parsed_currency or self.DEFAULT_CURRENCY).upper()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return (self.amount, self.currency) == (other.amount, other.currency)

    def __repr__(self) -> str:
        return f"Amount({str(self)!r})"

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


class Boolean:
    TRUE_STRINGS = ("1", "true", "yes", "on")
    FALSE_STRINGS = ("0", "false", "no", "off", "")

    def __init__(self, value: Any) -> None:
        if isinstance(value, Boolean):
            self.value = value.value
        elif isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in self.TRUE_STRINGS:
                self.value = True
            elif lowered in self.FALSE_STRINGS:
                self.value = False
            else:
                raise InvalidFieldValueError(f"invalid boolean: {value!r}")
        else:
            self.value = bool(value)

    def __bool__(self) -> bool:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Boolean):
            return self.value == other.value
        if isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __str__(self) -> str:
        return "1" if self.value else "0"


class Interval:
    """A period such as ``"1 month"`` or ``"3 day"``."""

    ALLOWED_UNITS = ("day", "week", "month", "year")

    def __init__(self, value: Any) -> None:
        if isinstance(value, Interval):
            quantity, unit = value.quantity, value.unit
        elif isinstance(value, str):
            parts = value.split()
            if len(parts) != 2:
                raise InvalidFieldValueError(f"invalid interval: {value!r}")
            quantity, unit = parts
        elif isinstance(value, (tuple, list)) and len(value) == 2:
            quantity, unit = value
        else:
            raise InvalidFieldValueError(f"invalid interval: {value!r}")

        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise InvalidFieldValueError(f"invalid interval quantity: {quantity!r}") from None
        if quantity < 1:
            raise InvalidFieldValueError(f"interval quantity must be positive: {quantity!r}")

        unit = str(unit).strip().lower()
        if unit.endswith("s"):
            unit = unit[:-1]
        if unit not in self.ALLOWED_UNITS:
            raise InvalidFieldValueError(f"invalid interval unit: {unit!r}")

        self.quantity = quantity
        self.unit = unit

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return (self.quantity, self.unit) == (other.quantity, other.unit)

    def __str__(self) -> str:
        return f"{self.quantity} {self.unit}"


class BillingFrequency(Interval):
    """How often a subscription is charged."""


class SubscriptionPeriod(Interval):
    """How long a subscription lasts; leave the field empty for no end."""


class Epoch:
    """A point in time rendered as seconds since the Unix epoch.

    Naive datetimes and plain dates are taken to be in
    ``config.SIMPLEPAY_TIMEZONE``.
    """

    def __init__(self, value: Any) -> None:
        if isinstance(value, Epoch):
            self.seconds = value.seconds
        elif isinstance(value, datetime.datetime):
            self.seconds = int(self._localize(value).timestamp())
        elif isinstance(value, datetime.date):
            midnight = datetime.datetime.combine(value, datetime.time())
            self.seconds = int(self._localize(midnight).timestamp())
        elif isinstance(value, bool):
            raise InvalidFieldValueError(f"invalid timestamp: {value!r}")
        else:
            try:
                self.seconds = int(value)
            except (TypeError, ValueError):
                raise InvalidFieldValueError(f"invalid timestamp: {value!r}") from None

    @staticmethod
    def _localize(value: datetime.datetime) -> datetime.datetime:
        if value.tzinfo is not None:
            return value
        try:
            zone = pytz.timezone(config.SIMPLEPAY_TIMEZONE)
        except pytz.UnknownTimeZoneError:
            raise ConfigurationError(
                f"unknown SIMPLEPAY_TIMEZONE: {config.SIMPLEPAY_TIMEZONE!r}"
            ) from None
        return zone.localize(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Epoch):
            return NotImplemented
        return self.seconds == other.seconds

    def __str__(self) -> str:
        return str(self.seconds)


def camelize(name: str) -> str:
    """``"account_id"`` -> ``"accountId"``."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class Field:
    def __init__(
        self,
        name: str,
        as_: str | None = None,
        required: bool = False,
        value: Any = None,
        type_: type | None = None,
    ) -> None:
        self.name = name
        self.service_name = as_ or camelize(name)
        self.required = required
        self.type = type_
        self.default = value
        self._value = None
        self.value = value

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        if value is None or (self.type is not None and value == ""):
            self._value = None
        elif self.type is not None and not isinstance(value, self.type):
            self._value = self.type(value)
        else:
            self._value = value

    @property
    def serialized(self) -> str:
        return "" if self._value is None else str(self._value)

    @property
    def is_blank(self) -> bool:
        return self.serialized == ""

    def clone(self) -> "Field":
        return Field(self.name, self.service_name, self.required, self.default, self.type)

    def to_input(self) -> str:
        return tag("input", {"name": self.service_name, "type": "hidden", "value": self.serialized})

    def __repr__(self) -> str:
        return f"<Field {self.name} as {self.service_name}{' required' if self.required else ''}>"


def field(name: str, **options: Any) -> Field:
    """Declare an optional field, e.g. ``field("amount", type_=Amount)``."""
    return Field(name, **options)


def required_field(name: str, **options: Any) -> Field:
    return Field(name, required=True, **options)


__all__ = [
    "Amount",
    "Boolean",
    "Interval",
    "BillingFrequency",
    "SubscriptionPeriod",
    "Epoch",
    "Field",
    "camelize",
    "field",
    "required_field",
]
