"""AWS SNS adapter – publish via aiobotocore + delivery-report webhook."""
from __future__ import annotations

import json
from typing import Any

from smskit.application.webhooks import (
    InboundWebhook,
    SignatureVerifier,
    SkipVerification,
    parse_timestamp,
    require_field,
)
from smskit.kernel.errors import AuthError, HttpError, InvalidPayloadError, ProviderError
from smskit.kernel.types import Headers, InboundMessage, SendRequest, SendResponse, fallback_id
from smskit.observability.logging import get_logger

__all__ = ["AWS_SNS", "AwsSnsClient"]

AWS_SNS = "aws-sns"
SNS_SENDER = "AWS-SNS"

_AUTH_CODES = frozenset({"AuthorizationError", "AuthorizationErrorException", "InvalidClientTokenId"})
_INVALID_CODES = frozenset({"InvalidParameter", "InvalidParameterValue", "InvalidParameterException"})

logger = get_logger(__name__)


def _require_aiobotocore() -> Any:  # pragma: no cover
    try:
        import aiobotocore.session  # noqa: PLC0415
        return aiobotocore.session
    except ImportError as exc:
        raise ImportError(
            "aiobotocore is required for AWS SNS sending. "
            "Install it with: pip install smskit[aws]"
        ) from exc


class AwsSnsClient(InboundWebhook):
    """Publishes SMS through AWS SNS and parses SNS HTTP notifications.

    Inbound traffic is the SNS JSON envelope: ``Notification`` messages
    carrying an SMS delivery report, and ``SubscriptionConfirmation``
    messages that need a manual confirm.  Delivery reports have no
    original sender, so ``from_`` is always ``"AWS-SNS"``.

    SNS envelopes are signed with X.509 certificates, which this adapter
    does not check; it therefore uses :class:`SkipVerification` unless a
    verifier is supplied.
    """

    def __init__(
        self,
        region: str,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        *,
        verifier: SignatureVerifier | None = None,
        session: Any = None,
    ) -> None:
        super().__init__(verifier or SkipVerification())
        self.region = region
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._session = session

    @property
    def provider(self) -> str:
        return AWS_SNS

    def _get_session(self) -> Any:
        if self._session is None:
            self._session = _require_aiobotocore().get_session()
        return self._session

    @staticmethod
    def message_attributes(request: SendRequest) -> dict[str, Any]:
        attributes: dict[str, Any] = {
            "AWS.SNS.SMS.SMSType": {"DataType": "String", "StringValue": "Transactional"},
        }
        if request.from_ and not request.from_.startswith("+"):
            attributes["AWS.SNS.SMS.SenderID"] = {"DataType": "String", "StringValue": request.from_}
        return attributes

    async def send(self, request: SendRequest) -> SendResponse:
        kwargs: dict[str, Any] = {}
        if self._access_key_id:
            kwargs["aws_access_key_id"] = self._access_key_id
            kwargs["aws_secret_access_key"] = self._secret_access_key
        session = self._get_session()
        try:
            async with session.create_client("sns", region_name=self.region, **kwargs) as client:
                resp = await client.publish(
                    PhoneNumber=request.to,
                    Message=request.text,
                    MessageAttributes=self.message_attributes(request),
                )
        except Exception as exc:
            raise self._map_error(exc) from exc

        message_id = resp.get("MessageId") or fallback_id()
        logger.info("sms_sent", provider=AWS_SNS, message_id=message_id)
        raw = {
            "MessageId": message_id,
            "Region": self.region,
            "ResponseMetadata": {"HTTPStatusCode": resp.get("ResponseMetadata", {}).get("HTTPStatusCode", 200)},
        }
        return SendResponse(id=message_id, provider=AWS_SNS, raw=raw)

    @staticmethod
    def _map_error(exc: Exception) -> Exception:
        response = getattr(exc, "response", None)
        if isinstance(response, dict) and "Error" in response:
            code = response["Error"].get("Code", "")
            message = response["Error"].get("Message") or str(exc)
            if code in _AUTH_CODES:
                return AuthError("AWS authorization failed", cause=exc)
            if code in _INVALID_CODES:
                return InvalidPayloadError(message, cause=exc)
            status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            return ProviderError(f"AWS SNS error: {code}: {message}", provider=AWS_SNS, status_code=status, cause=exc)
        return HttpError(f"{AWS_SNS}: {exc}", cause=exc)

    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        envelope = self._load_json(body, "SNS notification")
        kind = require_field(envelope, "Type")
        timestamp = parse_timestamp(envelope.get("Timestamp"))

        if kind == "Notification":
            report = self._load_json(require_field(envelope, "Message"), "delivery report")
            message_id = require_field(report, "messageId")
            logger.info("sns_delivery_report", message_id=message_id, status=report.get("status"))
            return InboundMessage(
                id=message_id,
                from_=SNS_SENDER,
                to=require_field(report, "destinationPhoneNumber"),
                text=f"Delivery Status: {require_field(report, 'status')}",
                timestamp=timestamp,
                provider=AWS_SNS,
                raw=envelope,
            )

        if kind == "SubscriptionConfirmation":
            logger.warning("sns_subscription_confirmation", topic_arn=envelope.get("TopicArn"))
            return InboundMessage(
                id=require_field(envelope, "MessageId"),
                from_=SNS_SENDER,
                to="SYSTEM",
                text="Subscription confirmation required",
                timestamp=timestamp,
                provider=AWS_SNS,
                raw=envelope,
            )

        raise ProviderError(f"Unsupported notification type: {kind}", provider=AWS_SNS)

    @staticmethod
    def _load_json(data: str | bytes, what: str) -> dict[str, Any]:
        try:
            decoded = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise InvalidPayloadError(f"invalid {what}: {exc}", cause=exc) from exc
        if not isinstance(decoded, dict):
            raise InvalidPayloadError(f"invalid {what}: expected a JSON object")
        return decoded

    def __repr__(self) -> str:
        return f"AwsSnsClient(region={self.region!r})"
