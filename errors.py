"""Exceptions raised while building and signing Simple Pay forms."""

from __future__ import annotations


class SimplepayError(Exception):
    """Base exception for all Simple Pay form errors."""


class UnknownServiceError(SimplepayError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown Simple Pay service: {self.name!r}"


class InvalidFieldValueError(SimplepayError, ValueError):
    """A value could not be coerced into the field's value type."""


class MissingFieldError(SimplepayError):
    """Required fields were left empty when the form was rendered."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = list(fields)
        super().__init__("missing required fields: " + ", ".join(self.fields))


class ConfigurationError(SimplepayError):
    """Library settings in :mod:`config` are missing or invalid."""


class MissingCredentialsError(ConfigurationError):
    """No AWS secret access key was available for signing."""


__all__ = [
    "SimplepayError",
    "UnknownServiceError",
    "InvalidFieldValueError",
    "MissingFieldError",
    "ConfigurationError",
    "MissingCredentialsError",
]
