"""
CRPT API client for the commissioning service.

Submission runs validate -> format lookup -> encode -> rate gate -> POST ->
interpret. Validation, format and encoding errors are raised before the gate
is touched, so they never consume budget. Once the gate admits a call, the
attempt counts against the quota whatever its outcome.
"""

import json
import time
import uuid
from typing import Optional

import httpx
from pydantic import BaseModel

from shared.errors import ErrorResponse, ExternalServiceError, GatewayException, TransportError
from shared.logging import get_logger, submission_id_var
from shared.metrics import MetricsCollector
from service_commissioning.app.adapters.encoder import encode_request, get_document_format
from service_commissioning.app.domain.models import Document
from service_commissioning.app.domain.validation import validate_document
from service_commissioning.app.ratelimit.gate import RateGate

GENERIC_ERROR_MESSAGE = "An unknown error occurred"


def generic_error_body() -> str:
    """Pretty-printed fallback body returned for every failed call."""
    return json.dumps({"error message": GENERIC_ERROR_MESSAGE}, indent=2, ensure_ascii=False)


class SubmissionResult(BaseModel):
    """Outcome of a call that reached the remote API.

    ``body`` is the response text on success (``None`` when the response had
    no body) and the generic error body on failure.
    """

    success: bool
    status_code: Optional[int] = None
    body: Optional[str] = None
    error: Optional[ErrorResponse] = None

    @classmethod
    def succeeded(cls, status_code: int, body: Optional[str]) -> "SubmissionResult":
        return cls(success=True, status_code=status_code, body=body)

    @classmethod
    def failed(cls, error: GatewayException, status_code: Optional[int] = None) -> "SubmissionResult":
        return cls(
            success=False,
            status_code=status_code,
            body=generic_error_body(),
            error=error.to_response(submission_id_var.get()),
        )


class CrptApiClient:
    """Client that files commissioning documents with the CRPT API."""

    def __init__(
        self,
        gate: RateGate,
        api_url: str,
        user_token: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.gate = gate
        self.api_url = api_url
        self.user_token = user_token
        self.timeout = timeout
        self.transport = transport
        self.metrics = metrics
        self.logger = get_logger("commissioning.crpt_client")

    async def submit(self, document: Document, signature: str) -> SubmissionResult:
        """Submit a commissioning document signed with ``signature``."""
        token = submission_id_var.set(str(uuid.uuid4()))
        log = self.logger.bind(doc_id=document.doc_id, doc_type=document.doc_type)
        start_time = time.monotonic()
        outcome = "error"

        try:
            validate_document(document)
            document_format = get_document_format(document)
            encoded = encode_request(document, signature, document_format)

            async with self.gate.acquire():
                result = await self._perform_request(encoded.form_body(), log)

            outcome = "success" if result.success else "failure"
            return result
        except GatewayException as e:
            log.warning("Submission rejected", code=e.code, error=e.message)
            outcome = e.code.lower()
            raise
        finally:
            if self.metrics is not None:
                self.metrics.record_submission(outcome, time.monotonic() - start_time)
            submission_id_var.reset(token)

    def _headers(self) -> dict:
        # The API expects this header pair even though the body is form-encoded
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.user_token}",
        }

    async def _perform_request(self, body: bytes, log) -> SubmissionResult:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                async with client.stream("POST", self.api_url, headers=self._headers(), content=body) as response:
                    await response.aread()
                    return self._handle_response(response, log)
        except httpx.HTTPError as e:
            log.error("HTTP request to CRPT API failed", error=str(e), error_type=type(e).__name__)
            return SubmissionResult.failed(
                TransportError(details={"error": str(e), "error_type": type(e).__name__})
            )

    def _handle_response(self, response: httpx.Response, log) -> SubmissionResult:
        status = response.status_code

        if 200 <= status < 300:
            body = response.text if response.content else None
            log.info("Document submitted", status_code=status)
            return SubmissionResult.succeeded(status, body)

        log.warning("CRPT API returned an error", status_code=status)
        return SubmissionResult.failed(
            ExternalServiceError("crpt", GENERIC_ERROR_MESSAGE, details={"status_code": status}),
            status_code=status,
        )
