"""Locust load-test: inbound SMS webhook traffic.

Simulates carrier callbacks against the unified webhook endpoint served by
``smskit.adapters.fastapi.create_app``.  Twilio requests are signed with
the same token the server is configured with, so the full verify → parse
path is exercised; a small share of requests carry a bad signature or an
unknown provider to keep the error paths warm.

Run the server with, for example::

    SMSKIT_TWILIO_ACCOUNT_SID=AC123 SMSKIT_TWILIO_AUTH_TOKEN=secret \\
    SMSKIT_TWILIO_CALLBACK_URL=http://localhost:3000/webhooks/twilio \\
    SMSKIT_PLIVO_AUTH_ID=MA123 SMSKIT_PLIVO_AUTH_TOKEN=secret \\
    SMSKIT_PLIVO_VERIFY_SIGNATURES=false \\
    SMSKIT_RATE_LIMIT_MAX_REQUESTS=100000 \\
    uvicorn --factory smskit.adapters.fastapi:create_app --port 3000

then::

    pip install locust
    locust -f docs/examples/locustfile.py --host=http://localhost:3000 \\
        --users=100 --spawn-rate=10 --run-time=60s --headless

Endpoints exercised
-------------------
GET  /health                liveness probe (not counted in mix)
POST /webhooks/twilio       signed form callback (200)
POST /webhooks/plivo        unsigned form callback (200, verification off)
POST /webhooks/twilio       bad signature (401)
POST /webhooks/unknown      unknown provider (404)

Metrics to watch
----------------
- p50, p95, p99 latency per endpoint
- Requests/second (RPS) at target concurrency
- 429 share once the rate limit is lowered
"""

from __future__ import annotations

import os
import random
import uuid
from urllib.parse import urlencode

from smskit.application.webhooks import HmacSigner, sorted_params_string

try:
    from locust import HttpUser, between, task
except ImportError as exc:
    raise SystemExit(
        "locust is not installed.  Install it with:  pip install locust"
    ) from exc


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

VALID_WEIGHT = 8
INVALID_WEIGHT = 1

TWILIO_TOKEN = os.environ.get("SMSKIT_TWILIO_AUTH_TOKEN", "secret")
TWILIO_URL = os.environ.get("SMSKIT_TWILIO_CALLBACK_URL", "http://localhost:3000/webhooks/twilio")

_NUMBERS: list[str] = [f"+1555{n:07d}" for n in range(200)]
_FORM = {"Content-Type": "application/x-www-form-urlencoded"}


def _twilio_params() -> dict[str, str]:
    return {
        "MessageSid": f"SM{uuid.uuid4().hex}",
        "From": random.choice(_NUMBERS),
        "To": "+15550000000",
        "Body": f"load test {random.randint(1, 10_000)}",
    }


def _twilio_signature(params: dict[str, str]) -> str:
    payload = TWILIO_URL + sorted_params_string(params.items())
    return HmacSigner.sign(TWILIO_TOKEN, payload, "sha1", "base64")


# ---------------------------------------------------------------------------
# User behaviour
# ---------------------------------------------------------------------------


class CarrierCallbackUser(HttpUser):
    """A carrier delivering inbound SMS callbacks.

    Waits between 10 ms and 100 ms between requests; carriers burst.
    """

    wait_time = between(0.01, 0.1)

    @task(VALID_WEIGHT)
    def twilio_signed(self) -> None:
        params = _twilio_params()
        headers = {**_FORM, "X-Twilio-Signature": _twilio_signature(params)}
        with self.client.post(
            "/webhooks/twilio",
            data=urlencode(params),
            headers=headers,
            name="/webhooks/twilio [signed]",
            catch_response=True,
        ) as resp:
            if resp.status_code not in (200, 429):
                resp.failure(f"Unexpected status: {resp.status_code}")

    @task(VALID_WEIGHT)
    def plivo_unsigned(self) -> None:
        params = {
            "MessageUUID": str(uuid.uuid4()),
            "From": random.choice(_NUMBERS),
            "To": "+15550000001",
            "Text": "load test",
        }
        with self.client.post(
            "/webhooks/plivo",
            data=urlencode(params),
            headers=_FORM,
            name="/webhooks/plivo",
            catch_response=True,
        ) as resp:
            if resp.status_code not in (200, 429):
                resp.failure(f"Unexpected status: {resp.status_code}")

    @task(INVALID_WEIGHT)
    def twilio_bad_signature(self) -> None:
        headers = {**_FORM, "X-Twilio-Signature": "bm90LWEtc2lnbmF0dXJl"}
        with self.client.post(
            "/webhooks/twilio",
            data=urlencode(_twilio_params()),
            headers=headers,
            name="/webhooks/twilio [bad signature]",
            catch_response=True,
        ) as resp:
            if resp.status_code in (401, 429):
                resp.success()
            else:
                resp.failure(f"Expected 401, got {resp.status_code}")

    @task(INVALID_WEIGHT)
    def unknown_provider(self) -> None:
        with self.client.post(
            "/webhooks/unknown",
            data="From=%2B1&To=%2B2&Text=hi",
            headers=_FORM,
            name="/webhooks/{unknown}",
            catch_response=True,
        ) as resp:
            if resp.status_code in (404, 429):
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    # ------------------------------------------------------------------
    # Health check  always runs, not counted in the traffic mix
    # ------------------------------------------------------------------

    def on_start(self) -> None:
        """Probe /health before the test starts; abort if unavailable."""
        resp = self.client.get("/health", name="/health [probe]")
        if resp.status_code != 200:
            self.environment.runner.quit()
