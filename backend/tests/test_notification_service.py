import json
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, Mock

import requests
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "backend"))
sys.path.insert(0, str(REPO_ROOT))

from app.dependencies.services import get_notification_service  # noqa: E402
from app.main import app  # noqa: E402
from app.services.errors import InputValidationError, NotificationError, UpstreamUnavailable  # noqa: E402
from app.services.notification_service import (  # noqa: E402
    NotificationService,
    format_recommendations_message,
    whatsapp_address,
)


class FakeTwilioConfig:
    ACCOUNT_SID = "AC123"
    AUTH_TOKEN = "secret"
    WHATSAPP_FROM = "whatsapp:+14155238886"
    DEFAULT_TEMPLATE_SID = "HXdefault"
    API_BASE_URL = "https://api.twilio.com/2010-04-01"
    TIMEOUT_SECONDS = 5


class MessageFormatTests(unittest.TestCase):
    def test_lists_first_three_cards(self):
        cards = [
            {"name": f"Card {i}", "issuer": "Bank", "annual_fee": 500.0, "reward_rate": "2%", "yearly_rewards": 1200}
            for i in range(1, 5)
        ]

        message = format_recommendations_message(cards)

        self.assertTrue(message.startswith("Your Top Credit Card Recommendations:\n\n"))
        self.assertIn("1. Card 1 (Bank)\n", message)
        self.assertIn("   • Annual Fee: ₹500\n", message)
        self.assertIn("   • Est. Annual Value: ₹1200\n", message)
        self.assertIn("3. Card 3 (Bank)", message)
        self.assertNotIn("Card 4", message)
        self.assertTrue(message.endswith("Visit our website to apply or compare more options!"))

    def test_missing_yearly_rewards_shows_na(self):
        message = format_recommendations_message(
            [{"name": "Card", "issuer": "Bank", "annual_fee": 0, "reward_rate": "1%"}]
        )
        self.assertIn("Est. Annual Value: ₹N/A", message)

    def test_whatsapp_prefix(self):
        self.assertEqual(whatsapp_address("+919999999999"), "whatsapp:+919999999999")
        self.assertEqual(whatsapp_address("whatsapp:+1"), "whatsapp:+1")


class NotificationServiceTests(unittest.TestCase):
    def setUp(self):
        self.http = MagicMock()
        self.http.post.return_value.json.return_value = {"sid": "SM1", "status": "queued"}
        self.store = Mock()
        self.service = NotificationService(self.store, config=FakeTwilioConfig, http=self.http)

    def test_sends_to_twilio(self):
        self.store.get_by_ids.return_value = []

        result = self.service.send_recommendations("+919999999999", [1, 2])

        self.assertEqual(result, {"success": True, "messageSid": "SM1", "status": "queued"})
        args, kwargs = self.http.post.call_args
        self.assertEqual(args[0], "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json")
        self.assertEqual(kwargs["auth"], ("AC123", "secret"))
        self.assertEqual(kwargs["data"]["To"], "whatsapp:+919999999999")
        # Unresolved ids fall back to placeholder rows
        self.assertIn("Credit Card 1", kwargs["data"]["Body"])

    def test_store_failure_uses_placeholder_rows(self):
        self.store.get_by_ids.side_effect = UpstreamUnavailable("catalog store", "down")
        self.service.send_recommendations("+1", [5])
        self.assertIn("Credit Card 5", self.http.post.call_args.kwargs["data"]["Body"])

    def test_transport_error_is_send_failed(self):
        self.http.post.side_effect = requests.ConnectionError("unreachable")

        with self.assertRaises(NotificationError) as ctx:
            self.service.send_recommendations("+1", [1], cards=[{"name": "A", "issuer": "B"}])

        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(ctx.exception.code, "SEND_FAILED")

    def test_template_uses_default_sid_without_variables(self):
        result = self.service.send_template("+919999999999")

        self.assertEqual(result["messageSid"], "SM1")
        data = self.http.post.call_args.kwargs["data"]
        self.assertEqual(data["ContentSid"], "HXdefault")
        self.assertEqual(data["To"], "whatsapp:+919999999999")
        self.assertNotIn("ContentVariables", data)
        self.assertNotIn("Body", data)

    def test_template_variables_are_sent_as_json(self):
        self.service.send_template("+1", "HXcustom", {"1": "Priya", "2": "HDFC Millennia"})

        data = self.http.post.call_args.kwargs["data"]
        self.assertEqual(data["ContentSid"], "HXcustom")
        self.assertEqual(json.loads(data["ContentVariables"]), {"1": "Priya", "2": "HDFC Millennia"})

    def test_template_requires_phone_number(self):
        with self.assertRaises(InputValidationError):
            self.service.send_template("  ")
        self.http.post.assert_not_called()


class NotificationApiTests(unittest.TestCase):
    def setUp(self):
        self.http = MagicMock()
        self.http.post.return_value.json.return_value = {"sid": "SM9", "status": "sent"}
        service = NotificationService(None, config=FakeTwilioConfig, http=self.http)
        app.dependency_overrides[get_notification_service] = lambda: service
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_phone_number_required(self):
        resp = self.client.post("/api/v1/notifications/whatsapp/recommendations", json={"cardIds": [1]})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

    def test_card_ids_required(self):
        resp = self.client.post(
            "/api/v1/notifications/whatsapp/recommendations",
            json={"phoneNumber": "+1", "cardIds": []},
        )
        self.assertEqual(resp.status_code, 400)

    def test_send_success(self):
        resp = self.client.post(
            "/api/v1/notifications/whatsapp/recommendations",
            json={"phoneNumber": "+1", "cardIds": [1, 2]},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json(), {"success": True, "messageSid": "SM9", "status": "sent"})

    def test_send_failure_is_502(self):
        self.http.post.side_effect = requests.Timeout("slow")
        resp = self.client.post(
            "/api/v1/notifications/whatsapp/recommendations",
            json={"phoneNumber": "+1", "cardIds": [1]},
        )
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["error"]["code"], "SEND_FAILED")

    def test_template_endpoint(self):
        resp = self.client.post(
            "/api/v1/notifications/whatsapp/send",
            json={"phoneNumber": "+1", "templateSid": "HXcustom", "variables": {"1": "Asha"}},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["messageSid"], "SM9")
        self.assertEqual(self.http.post.call_args.kwargs["data"]["ContentSid"], "HXcustom")

    def test_template_endpoint_requires_phone_number(self):
        resp = self.client.post("/api/v1/notifications/whatsapp/send", json={"variables": {}})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")


if __name__ == "__main__":
    unittest.main()
