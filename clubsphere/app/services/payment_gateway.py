"""
services/payment_gateway.py — Stripe PaymentIntents over plain HTTP.

Only two calls are needed:
  POST /v1/payment_intents        create an intent for an amount in minor units
  GET  /v1/payment_intents/<id>   read its status back (pull-based confirmation)

Any transport error or non-2xx response raises PaymentGatewayError; the
payment service turns it into PAYMENT_PROVIDER_ERROR (502). No retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The processor could not be reached or rejected the request."""


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str | None
    status: str
    # Set when the last charge attempt was declined (status goes back to
    # requires_payment_method).
    failure_message: str | None = None


class StripeGateway:

    def __init__(
            self,
            secret_key: str,
            api_base: str = "https://api.stripe.com",
            timeout: int = 10,
            http: requests.Session | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._http = http or requests.Session()

    @classmethod
    def from_config(cls, config) -> "StripeGateway":
        return cls(
            secret_key=config["STRIPE_SECRET_KEY"],
            api_base=config["STRIPE_API_BASE"],
            timeout=config["PAYMENT_TIMEOUT_SECONDS"],
        )

    def create_intent(self, amount_minor: int, currency: str, metadata: dict) -> PaymentIntent:
        form = {
            "amount": amount_minor,
            "currency": currency,
            "automatic_payment_methods[enabled]": "true",
        }
        # Stripe expects nested form keys: metadata[clubId]=...
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = str(value)

        body = self._request("POST", "/v1/payment_intents", data=form)
        return self._to_intent(body)

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        body = self._request("GET", f"/v1/payment_intents/{intent_id}")
        return self._to_intent(body)

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self._api_base}{path}"
        try:
            response = self._http.request(
                method,
                url,
                auth=(self._secret_key, ""),
                timeout=self._timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.error("Payment processor unreachable: %s %s: %s", method, path, exc)
            raise PaymentGatewayError(str(exc)) from exc

        if not response.ok:
            logger.error(
                "Payment processor returned %s for %s %s: %s",
                response.status_code,
                method,
                path,
                response.text[:500],
            )
            raise PaymentGatewayError(f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise PaymentGatewayError("Malformed response body") from exc

    @staticmethod
    def _to_intent(body: dict) -> PaymentIntent:
        try:
            return PaymentIntent(
                id=body["id"],
                client_secret=body.get("client_secret"),
                status=body["status"],
                failure_message=_failure_message(body),
            )
        except KeyError as exc:
            raise PaymentGatewayError(f"Response missing {exc.args[0]!r}") from exc


def _failure_message(body: dict) -> str | None:
    error = body.get("last_payment_error")
    if not error:
        return None
    return error.get("message") or error.get("code") or "declined"
