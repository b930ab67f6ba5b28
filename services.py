"""Amazon Simple Pay services (standard buttons, donations, subscriptions,
marketplace buttons and marketplace policies).

Every service declares its fields once on the class; each instance works on
its own copies, so values set on one form never leak into another::

    donation = Donation()
    donation.amount = 25
    html = donation.form({"description": "Spring fund drive"})

``access_key`` and ``account_id`` are filled from :mod:`config`, and the
``signature`` field is generated when the form is rendered.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import config
from errors import MissingFieldError, UnknownServiceError
from form_helper import content_tag, tag
from payment_gateway import SIGNATURE_FIELD, generate_signature
from service_fields import (
    Amount,
    BillingFrequency,
    Boolean,
    Epoch,
    Field,
    SubscriptionPeriod,
    field,
    required_field,
)

logger = logging.getLogger(__name__)


class Service:
    """Base class for all Simple Pay services."""

    ENDPOINT_URL = "https://authorize.payments.amazon.com/pba/paypipeline"
    SANDBOX_URL = "https://authorize.payments-sandbox.amazon.com/pba/paypipeline"
    # Amazon "Pay Now" button
    BUTTON_URL = "https://images-na.ssl-images-amazon.com/images/G/01/asp/beige_medium_paynow_withlogo_whitebg.gif"

    FIELDS: tuple[Field, ...] = ()
    SUBMIT_TAG: str | None = None

    _field_names: frozenset[str] = frozenset()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._field_names = frozenset(f.name for f in cls.FIELDS)

    def __init__(self, **values: Any) -> None:
        fields = [f.clone() for f in self.FIELDS]
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "_by_name", {f.name: f for f in fields})
        self.set_fields(values)

    def __getattr__(self, name: str) -> Any:
        by_name = self.__dict__.get("_by_name", {})
        if name in by_name:
            return by_name[name].value
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._field_names:
            self._by_name[name].value = value
        else:
            object.__setattr__(self, name, value)

    @classmethod
    def has_field(cls, name: str) -> bool:
        return name in cls._field_names

    def field(self, name: str) -> Field:
        return self._by_name[name]

    def url(self, sandbox: bool | None = None) -> str:
        if sandbox is None:
            sandbox = config.SIMPLEPAY_USE_SANDBOX
        return self.SANDBOX_URL if sandbox else self.ENDPOINT_URL

    def set_fields(self, values: Mapping[str, Any] | None) -> None:
        """Assign known fields from ``values``; unknown keys are ignored."""
        for key, value in (values or {}).items():
            if self.has_field(key):
                setattr(self, key, value)
            else:
                logger.debug("%s ignores unknown field %r", type(self).__name__, key)

    def missing_fields(self) -> list[str]:
        return [
            f.name
            for f in self.fields
            if f.required and f.service_name != SIGNATURE_FIELD and f.is_blank
        ]

    def signed_values(self, attributes: Mapping[str, Any] | None = None) -> dict[str, str]:
        """Apply defaults and ``attributes``, validate, sign and return the
        gateway parameters as a ``{gateway name: value}`` dict."""
        self._set_accessor_fields()
        self.set_fields(attributes)
        missing = self.missing_fields()
        if missing:
            raise MissingFieldError(missing)
        self._set_signature()
        return {f.service_name: f.serialized for f in self.fields}

    def form(self, attributes: Mapping[str, Any] | None = None, submit: str | None = None) -> str:
        self.signed_values(attributes)
        content = "".join(f.to_input() for f in self.fields) + self._submit_field(submit)
        return content_tag("form", content, {"method": "post", "action": self.url()})

    def _submit_field(self, submit: str | None) -> str:
        if submit:
            return str(submit)
        return tag(
            "input",
            {
                "type": "image",
                "src": self.BUTTON_URL,
                "height": "43px",
                "width": "151px",
                "value": self.SUBMIT_TAG,
            },
        )

    def _set_accessor_fields(self) -> None:
        if self.has_field("access_key") and config.SIMPLEPAY_AWS_ACCESS_KEY_ID:
            self.access_key = config.SIMPLEPAY_AWS_ACCESS_KEY_ID
        if self.has_field("account_id") and config.SIMPLEPAY_ACCOUNT_ID:
            self.account_id = config.SIMPLEPAY_ACCOUNT_ID

    def _set_signature(self) -> None:
        values = {
            f.service_name: f.serialized for f in self.fields if f.service_name != SIGNATURE_FIELD
        }
        signature = generate_signature(values)
        for f in self.fields:
            if f.service_name == SIGNATURE_FIELD:
                f.value = signature


class Standard(Service):
    FIELDS = (
        required_field("access_key"),
        required_field("signature"),
        required_field("account_id", as_="amazonPaymentsAccountId"),
        required_field("description"),
        required_field("amount", type_=Amount),
        required_field("cobranding_style", value="logo"),
        field("reference_id"),
        field("immediate_return", type_=Boolean),
        field("collect_shipping_address", type_=Boolean),
        field("process_immediately", as_="processImmediate", type_=Boolean),
        field("return_url"),
        field("abandon_url"),
        field("ipn_url"),
    )


class Donation(Service):
    FIELDS = (
        required_field("access_key"),
        required_field("signature"),
        required_field("account_id", as_="amazonPaymentsAccountId"),
        required_field("description"),
        required_field("amount", type_=Amount),
        field("recipient_email"),
        field("fixed_marketplace_fee", type_=Amount),
        field("variable_marketplace_fee"),
        required_field("cobranding_style", value="logo"),
        field("reference_id"),
        field("immediate_return", type_=Boolean),
        field("collect_shipping_address", type_=Boolean),
        field("process_immediately", as_="processImmediate", type_=Boolean),
        field("return_url"),
        field("abandon_url"),
        field("ipn_url"),
        required_field("donation_widget", as_="isDonationWidget", value="1"),
    )


class Subscription(Service):
    FIELDS = (
        required_field("access_key"),
        required_field("signature"),
        required_field("account_id", as_="amazonPaymentsAccountId"),
        required_field("description"),
        required_field("amount", type_=Amount),
        required_field("recurring_frequency", type_=BillingFrequency),
        field("subscription_period", type_=SubscriptionPeriod),
        field("recurring_start_date", type_=Epoch),
        field("reference_id"),
        field("immediate_return", type_=Boolean),
        field("collect_shipping_address", type_=Boolean),
        field("process_immediately", as_="processImmediate", type_=Boolean),
        field("return_url"),
        field("abandon_url"),
        field("ipn_url"),
        required_field("cobranding_style", value="logo"),
        field("donation_widget", as_="isDonationWidget", type_=Boolean),
    )


class Marketplace(Service):
    FIELDS = (
        required_field("access_key"),
        required_field("signature"),
        required_field("account_id", as_="amazonPaymentsAccountId"),
        required_field("description"),
        required_field("amount", type_=Amount),
        required_field("recipient_email"),
        field("fixed_marketplace_fee", type_=Amount),
        field("variable_marketplace_fee"),
        required_field("cobranding_style", value="logo"),
        field("reference_id"),
        field("immediate_return", type_=Boolean),
        field("collect_shipping_address", type_=Boolean),
        field("process_immediately", as_="processImmediate", type_=Boolean),
        field("return_url"),
        field("abandon_url"),
        field("ipn_url"),
    )


class MarketplacePolicy(Service):
    """Registers a seller (recipient) for marketplace fees before they can
    receive marketplace payments."""

    ENDPOINT_URL = "https://authorize.payments.amazon.com/cobranded-ui/actions/start"
    SANDBOX_URL = "https://authorize.payments-sandbox.amazon.com/cobranded-ui/actions/start"
    SUBMIT_TAG = "Register"

    FIELDS = (
        required_field("access_key", as_="callerKey"),
        required_field("signature"),
        required_field("max_fixed_fee"),
        required_field("max_variable_fee"),
        required_field("return_url"),
        required_field("reference_id", as_="callerReference"),
        field("collect_email_address", type_=Boolean),
        required_field("record_emd", as_="recordEmd", type_=Boolean, value=True),
        required_field("pipeline_name", value="Recipient"),
    )


SERVICES: dict[str, type[Service]] = {
    "standard": Standard,
    "donation": Donation,
    "subscription": Subscription,
    "marketplace": Marketplace,
    "marketplace_policy": MarketplacePolicy,
}


def get_service(name: str) -> type[Service]:
    try:
        return SERVICES[name]
    except KeyError:
        raise UnknownServiceError(name) from None


def simplepay_form_for(
    name: str, attributes: Mapping[str, Any] | None = None, submit: str | None = None
) -> str:
    """Render the signed form of the service registered as ``name``."""
    return get_service(name)().form(attributes, submit)


__all__ = [
    "Service",
    "Standard",
    "Donation",
    "Subscription",
    "Marketplace",
    "MarketplacePolicy",
    "SERVICES",
    "get_service",
    "simplepay_form_for",
]
