# loyaltea/core/mailing_list.py
"""
Mailing-list client for Loyaltea backend.

Responsibilities:
  - Subscribe an email address to a Mailchimp audience (list).
  - Report any failure as ServiceError(SUBSCRIPTION_FAILED); no retries.

Typical .env configuration:

    MAILCHIMP_API_KEY=0123456789abcdef-us21
    MAILCHIMP_LIST_ID=a1b2c3d4e5

The datacenter ("us21" above) is the suffix of the API key after the last
dash, and selects the API host.
"""

import logging

import httpx

from loyaltea.core.config import Settings
from loyaltea.core.errors import ErrorKind, ServiceError

logger = logging.getLogger(__name__)

# Fixed budget for the outbound call, in seconds.
SUBSCRIBE_TIMEOUT = 10.0


class MailchimpSubscriber:
    """Adds addresses to a single Mailchimp list."""

    def __init__(
        self,
        api_key: str,
        list_id: str,
        client: httpx.Client | None = None,
    ):
        if not api_key or not list_id:
            raise ValueError("Mailchimp API key and list id are required")
        self.api_key = api_key
        self.list_id = list_id
        self._client = client or httpx.Client(timeout=SUBSCRIBE_TIMEOUT)

    @property
    def datacenter(self) -> str:
        return self.api_key.rsplit("-", 1)[-1]

    @property
    def members_url(self) -> str:
        return (
            f"https://{self.datacenter}.api.mailchimp.com/3.0/"
            f"lists/{self.list_id}/members"
        )

    def subscribe(self, email: str) -> None:
        """
        Subscribe `email` to the list.

        Raises
        ------
        ServiceError(SUBSCRIPTION_FAILED):
            On transport errors or any status other than 200/201.
        """
        try:
            response = self._client.post(
                self.members_url,
                json={"email_address": email, "status": "subscribed"},
                # Mailchimp accepts any username with the API key as password
                auth=("anystring", self.api_key),
                timeout=SUBSCRIBE_TIMEOUT,
            )
        except httpx.HTTPError as exc:
            raise ServiceError(
                ErrorKind.SUBSCRIPTION_FAILED, f"Mailchimp request failed: {exc}"
            ) from exc

        if response.status_code not in (200, 201):
            raise ServiceError(
                ErrorKind.SUBSCRIPTION_FAILED,
                f"Mailchimp API error: {response.status_code} {response.reason_phrase}",
            )

        logger.info("Subscribed offer sender to mailing list %s", self.list_id)

    def close(self) -> None:
        self._client.close()


def build_subscriber(settings: Settings) -> MailchimpSubscriber | None:
    """Return a subscriber when Mailchimp is configured, else None (skip)."""
    if not settings.mailing_list_enabled:
        return None
    return MailchimpSubscriber(settings.MAILCHIMP_API_KEY, settings.MAILCHIMP_LIST_ID)
