"""Unit tests – AWS SNS adapter (publish + notification parsing)."""
from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from smskit.adapters.aws_sns import AwsSnsClient
from smskit.application.webhooks import InboundRegistry, SkipVerification, WebhookProcessor
from smskit.kernel.errors import AuthError, HttpError, InvalidPayloadError, ProviderError
from smskit.kernel.types import SendRequest

REPORT = {
    "notification": {"messageId": "msg-123", "timestamp": "2023-01-01T00:00:00.000Z"},
    "delivery": {"destination": "+1234567890", "priceInUSD": 0.00645, "smsType": "Transactional"},
    "status": "SUCCESS",
    "messageId": "msg-123",
    "destinationPhoneNumber": "+1234567890",
}


def _envelope(kind: str = "Notification", **overrides: Any) -> bytes:
    data = {
        "Type": kind,
        "MessageId": "sns-1",
        "TopicArn": "arn:aws:sns:us-east-1:123:sms",
        "Message": json.dumps(REPORT),
        "Timestamp": "2023-01-01T00:00:01.000Z",
        "SignatureVersion": "1",
        "Signature": "c2ln",
        "SigningCertURL": "https://sns.us-east-1.amazonaws.com/cert.pem",
    }
    data.update(overrides)
    return json.dumps(data).encode()


# ---------------------------------------------------------------------------
# Fake aiobotocore session
# ---------------------------------------------------------------------------


class _FakeClientError(Exception):
    def __init__(self, code: str, status: int = 400) -> None:
        super().__init__(code)
        self.response = {"Error": {"Code": code, "Message": f"{code} happened"}, "ResponseMetadata": {"HTTPStatusCode": status}}


class _FakeSnsClient:
    def __init__(self, session: "_FakeSession") -> None:
        self._session = session

    async def __aenter__(self) -> "_FakeSnsClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        return None

    async def publish(self, **kwargs: Any) -> dict[str, Any]:
        self._session.published.append(kwargs)
        if self._session.error is not None:
            raise self._session.error
        return {"MessageId": "sns-msg-1", "ResponseMetadata": {"HTTPStatusCode": 200}}


class _FakeSession:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.published: list[dict[str, Any]] = []
        self.client_kwargs: dict[str, Any] = {}

    def create_client(self, service: str, **kwargs: Any) -> _FakeSnsClient:
        assert service == "sns"
        self.client_kwargs = kwargs
        return _FakeSnsClient(self)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestAwsSnsParse:
    def test_provider_and_policy(self) -> None:
        client = AwsSnsClient("us-east-1")
        assert client.provider == "aws-sns"
        assert isinstance(client.verifier, SkipVerification)
        assert not client.verifies_signatures

    def test_delivery_report(self) -> None:
        msg = AwsSnsClient("us-east-1").parse_inbound([], _envelope())
        assert msg.id == "msg-123"
        assert msg.from_ == "AWS-SNS"
        assert msg.to == "+1234567890"
        assert msg.text == "Delivery Status: SUCCESS"
        assert msg.provider == "aws-sns"
        assert msg.timestamp is not None and msg.timestamp.year == 2023
        assert msg.raw["TopicArn"].startswith("arn:aws:sns")

    def test_subscription_confirmation(self) -> None:
        body = _envelope("SubscriptionConfirmation", MessageId="sub-1", Message="You have chosen to subscribe")
        msg = AwsSnsClient("us-east-1").parse_inbound([], body)
        assert msg.id == "sub-1"
        assert msg.to == "SYSTEM"
        assert msg.text == "Subscription confirmation required"

    def test_numeric_timestamp_is_dropped(self) -> None:
        body = _envelope("SubscriptionConfirmation", MessageId="m1", Timestamp=1700000000)
        msg = AwsSnsClient("us-east-1").parse_inbound([], body)
        assert msg.id == "m1"
        assert msg.timestamp is None

    def test_numeric_timestamp_processes_as_success(self) -> None:
        registry = InboundRegistry().with_adapter(AwsSnsClient("us-east-1"))
        body = _envelope(Timestamp=1700000000)
        response = WebhookProcessor(registry).process("aws-sns", [("Content-Type", "application/json")], body)
        assert response.status == 200
        assert json.loads(response.body)["timestamp"] is None

    def test_unknown_type_is_provider_error(self) -> None:
        with pytest.raises(ProviderError):
            AwsSnsClient("us-east-1").parse_inbound([], _envelope("UnsubscribeConfirmation"))

    def test_invalid_json(self) -> None:
        with pytest.raises(InvalidPayloadError):
            AwsSnsClient("us-east-1").parse_inbound([], b"not json")

    def test_report_missing_destination(self) -> None:
        report = {k: v for k, v in REPORT.items() if k != "destinationPhoneNumber"}
        with pytest.raises(InvalidPayloadError) as exc_info:
            AwsSnsClient("us-east-1").parse_inbound([], _envelope(Message=json.dumps(report)))
        assert exc_info.value.field == "destinationPhoneNumber"

    def test_report_not_json(self) -> None:
        with pytest.raises(InvalidPayloadError):
            AwsSnsClient("us-east-1").parse_inbound([], _envelope(Message="plain text"))


# ---------------------------------------------------------------------------
# Publish
# ---------------------------------------------------------------------------


class TestAwsSnsSend:
    def test_publish_transactional(self) -> None:
        session = _FakeSession()
        client = AwsSnsClient("eu-west-1", "AKIA", "secret", session=session)
        resp = asyncio.run(client.send(SendRequest(to="+351900000000", from_="+15550000000", text="hi")))

        assert resp.id == "sns-msg-1"
        assert resp.provider == "aws-sns"
        assert resp.raw["Region"] == "eu-west-1"
        call = session.published[0]
        assert call["PhoneNumber"] == "+351900000000"
        assert call["Message"] == "hi"
        attrs = call["MessageAttributes"]
        assert attrs["AWS.SNS.SMS.SMSType"]["StringValue"] == "Transactional"
        assert "AWS.SNS.SMS.SenderID" not in attrs
        assert session.client_kwargs["aws_access_key_id"] == "AKIA"
        assert session.client_kwargs["region_name"] == "eu-west-1"

    def test_alphanumeric_sender_id(self) -> None:
        attrs = AwsSnsClient.message_attributes(SendRequest(to="+1", from_="ACME", text="x"))
        assert attrs["AWS.SNS.SMS.SenderID"]["StringValue"] == "ACME"

    def test_empty_sender_has_no_sender_id(self) -> None:
        attrs = AwsSnsClient.message_attributes(SendRequest(to="+1", from_="", text="x"))
        assert "AWS.SNS.SMS.SenderID" not in attrs

    def test_default_credentials_chain(self) -> None:
        session = _FakeSession()
        asyncio.run(AwsSnsClient("us-east-1", session=session).send(SendRequest(to="+1", from_="", text="x")))
        assert "aws_access_key_id" not in session.client_kwargs

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            ("AuthorizationError", AuthError),
            ("InvalidParameter", InvalidPayloadError),
            ("Throttling", ProviderError),
        ],
    )
    def test_client_errors_are_mapped(self, code: str, expected: type[Exception]) -> None:
        session = _FakeSession(error=_FakeClientError(code))
        with pytest.raises(expected):
            asyncio.run(AwsSnsClient("us-east-1", session=session).send(SendRequest(to="+1", from_="", text="x")))

    def test_transport_failure_is_http_error(self) -> None:
        session = _FakeSession(error=OSError("connection reset"))
        with pytest.raises(HttpError):
            asyncio.run(AwsSnsClient("us-east-1", session=session).send(SendRequest(to="+1", from_="", text="x")))
