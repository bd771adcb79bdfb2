"""
WhatsApp delivery through the Twilio REST API: recommendation summaries and content templates.
"""

import json
import logging
from typing import Any, Iterable, List, Mapping, Optional

import requests

from app.config import TwilioConfig
from app.services.catalog_service import CatalogService
from app.services.errors import InputValidationError, NotificationError, UpstreamUnavailable
from engine.comparison import placeholder_cards

logger = logging.getLogger(__name__)

MESSAGE_HEADER = "Your Top Credit Card Recommendations:\n\n"
MESSAGE_FOOTER = "Visit our website to apply or compare more options!"
MAX_CARDS_IN_MESSAGE = 3


def _amount(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_recommendations_message(cards: Iterable[Mapping[str, Any]]) -> str:
    """
    Plain-text summary of the first three cards.

    Example:
        1. Kotak 811 (Kotak Mahindra Bank)
           • Annual Fee: ₹0
           • Rewards: 1% on all spends
           • Est. Annual Value: ₹1800
    """
    message = MESSAGE_HEADER
    for index, card in enumerate(list(cards)[:MAX_CARDS_IN_MESSAGE], start=1):
        message += f"{index}. {card.get('name')} ({card.get('issuer')})\n"
        message += f"   • Annual Fee: ₹{_amount(card.get('annual_fee'))}\n"
        message += f"   • Rewards: {card.get('reward_rate')}\n"
        message += f"   • Est. Annual Value: ₹{_amount(card.get('yearly_rewards') or 'N/A')}\n\n"
    message += MESSAGE_FOOTER
    return message


def whatsapp_address(phone_number: str) -> str:
    phone_number = phone_number.strip()
    return phone_number if phone_number.startswith("whatsapp:") else f"whatsapp:{phone_number}"


class NotificationService:
    def __init__(self, store: Optional[CatalogService] = None, config=TwilioConfig, http=requests):
        self.store = store
        self.config = config
        self.http = http

    def resolve_cards(self, card_ids: List[int]) -> List[dict]:
        """Stored cards for the ids, or placeholder rows when none resolve."""
        cards = []
        if self.store is not None:
            try:
                cards = self.store.get_by_ids(card_ids)
            except UpstreamUnavailable as exc:
                logger.warning(f"Card lookup for WhatsApp message failed: {exc}")
        if not cards:
            cards = placeholder_cards(card_ids)
        return [card.to_dict() for card in cards]

    def send_message(self, to: str, body: str) -> dict:
        """Send one free-form WhatsApp message."""
        return self._create_message(to, {"Body": body})

    def send_template(
        self,
        phone_number: Optional[str],
        template_sid: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> dict:
        """
        Send a pre-approved content template.

        Args:
            phone_number: recipient, with or without the whatsapp: prefix
            template_sid: content template SID; DEFAULT_TEMPLATE_SID when omitted
            variables: template placeholders, sent as ContentVariables JSON when non-empty
        """
        if not phone_number or not phone_number.strip():
            raise InputValidationError("Phone number is required")

        fields = {"ContentSid": template_sid or self.config.DEFAULT_TEMPLATE_SID}
        if variables:
            fields["ContentVariables"] = json.dumps(dict(variables))
        return self._create_message(phone_number, fields)

    def _create_message(self, to: str, fields: Mapping[str, str]) -> dict:
        """
        POST one message to the Twilio Messages resource.

        Raises:
            NotificationError: credentials missing, transport failure or Twilio rejection
        """
        if not self.config.ACCOUNT_SID or not self.config.AUTH_TOKEN:
            logger.error("Twilio credentials are not configured")
            raise NotificationError(details={"reason": "Twilio credentials are not configured"})

        url = f"{self.config.API_BASE_URL}/Accounts/{self.config.ACCOUNT_SID}/Messages.json"
        try:
            response = self.http.post(
                url,
                data={"From": self.config.WHATSAPP_FROM, "To": whatsapp_address(to), **fields},
                auth=(self.config.ACCOUNT_SID, self.config.AUTH_TOKEN),
                timeout=self.config.TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.error(f"Error sending WhatsApp message: {exc}")
            raise NotificationError(details={"reason": str(exc)}) from exc
        except ValueError as exc:
            logger.error(f"Twilio returned a non-JSON response: {exc}")
            raise NotificationError(details={"reason": "invalid response from provider"}) from exc

        logger.info(f"WhatsApp message sent with SID: {payload.get('sid')}")
        return {"success": True, "messageSid": payload.get("sid"), "status": payload.get("status")}

    def send_recommendations(
        self,
        phone_number: Optional[str],
        card_ids: Optional[List[int]],
        cards: Optional[List[Mapping[str, Any]]] = None,
    ) -> dict:
        if not phone_number or not phone_number.strip():
            raise InputValidationError("Phone number is required")
        if not card_ids:
            raise InputValidationError("Card IDs are required")

        if not cards:
            cards = self.resolve_cards(card_ids)
        return self.send_message(phone_number, format_recommendations_message(cards))
