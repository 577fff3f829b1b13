# loyaltea/services/offer_decoders.py
"""
Wire decoders for offer webhooks.

Each email provider posts offers in its own shape:

  - mailchimp: JSON body
        {"senderEmail": "...", "subject": "...", "body": "...",
         "brand": "...", "source": "...", "tags": ["..."]}
    (`sender_email` is accepted as an alias of `senderEmail`)

  - mailgun: form-encoded body
        sender=...&subject=...&body-plain=...&brand=...&tags=a&tags=b
    (`tags` may also be a single comma-separated value)

A decoder only maps wire keys onto OfferPayload and rejects bodies that
cannot be read; it does not validate the sender address.
"""

from collections.abc import Mapping
from typing import Any

from fastapi import Request
from pydantic import ValidationError

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.schemas.offer import OfferPayload


def _build_payload(fields: dict[str, Any]) -> OfferPayload:
    # Explicit nulls are treated as absent fields
    cleaned = {key: value for key, value in fields.items() if value is not None}
    try:
        return OfferPayload.model_validate(cleaned)
    except ValidationError as exc:
        raise ServiceError(ErrorKind.INVALID_PAYLOAD, str(exc)) from exc


class JsonOfferDecoder:
    """Mailchimp-style JSON webhook body."""

    provider = "mailchimp"

    def decode(self, data: Any) -> OfferPayload:
        if not isinstance(data, Mapping):
            raise ServiceError(ErrorKind.INVALID_PAYLOAD, "JSON body must be an object")
        sender = data.get("senderEmail")
        if sender is None:
            sender = data.get("sender_email")
        return _build_payload(
            {
                "sender_email": sender,
                "subject": data.get("subject"),
                "body": data.get("body"),
                "brand": data.get("brand"),
                "source": data.get("source"),
                "tags": data.get("tags"),
            }
        )

    async def read(self, request: Request) -> OfferPayload:
        try:
            data = await request.json()
        except ValueError as exc:
            raise ServiceError(ErrorKind.INVALID_PAYLOAD, "body is not valid JSON") from exc
        return self.decode(data)


class FormOfferDecoder:
    """Mailgun-style form-encoded webhook body."""

    provider = "mailgun"

    def _text(self, form: Mapping, key: str) -> str | None:
        value = form.get(key)
        if value is not None and not isinstance(value, str):
            # e.g. an uploaded file where text was expected
            raise ServiceError(ErrorKind.INVALID_PAYLOAD, f"field {key!r} must be text")
        return value

    def _tags(self, form: Mapping) -> list[str]:
        raw = form.getlist("tags") if hasattr(form, "getlist") else [form.get("tags")]
        tags: list[str] = []
        for value in raw:
            if value is None:
                continue
            if not isinstance(value, str):
                raise ServiceError(ErrorKind.INVALID_PAYLOAD, "field 'tags' must be text")
            tags.extend(tag.strip() for tag in value.split(",") if tag.strip())
        return tags

    def decode(self, form: Mapping) -> OfferPayload:
        return _build_payload(
            {
                "sender_email": self._text(form, "sender"),
                "subject": self._text(form, "subject"),
                "body": self._text(form, "body-plain"),
                "brand": self._text(form, "brand"),
                "source": self._text(form, "source"),
                "tags": self._tags(form),
            }
        )

    async def read(self, request: Request) -> OfferPayload:
        form = await request.form()
        return self.decode(form)


DECODERS: dict[str, JsonOfferDecoder | FormOfferDecoder] = {
    JsonOfferDecoder.provider: JsonOfferDecoder(),
    FormOfferDecoder.provider: FormOfferDecoder(),
}


def get_decoder(provider: str) -> JsonOfferDecoder | FormOfferDecoder:
    """Return the decoder for a configured provider name."""
    try:
        return DECODERS[provider]
    except KeyError:
        raise ValueError(f"Unknown offer provider: {provider!r}") from None
