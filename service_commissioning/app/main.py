"""
Commissioning service for the CRPT gateway.
"""

from typing import Dict, Optional

import httpx
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.base_service import BaseService
from service_commissioning.app.adapters.crpt_client import CrptApiClient
from service_commissioning.app.config import CommissioningConfig, get_config
from service_commissioning.app.domain.models import Document
from service_commissioning.app.ratelimit.gate import RateGate


class SubmitDocumentRequest(BaseModel):
    """Body of a commissioning submission."""

    document: Document
    signature: str


class CommissioningService(BaseService):
    """Commissioning document service implementation."""

    def __init__(
        self,
        config: Optional[CommissioningConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or get_config()
        super().__init__("commissioning", config)
        self.gate = RateGate(config.time_unit, config.request_limit)
        self.crpt_client = CrptApiClient(
            self.gate,
            api_url=config.api_url,
            user_token=config.user_token,
            timeout=config.http_timeout_seconds,
            transport=transport,
            metrics=self.metrics,
        )
        self._setup_commissioning_routes()

    def _describe_dependencies(self) -> Dict[str, str]:
        return {"crpt_api": self.config.api_url}

    def _setup_commissioning_routes(self):
        """Set up commissioning routes."""

        @self.app.get("/")
        async def root():
            return {
                "service": self.service_name,
                "message": "CRPT Gateway - Commissioning Service",
            }

        @self.app.post("/api/v1/documents/commissioning")
        async def submit_document(payload: SubmitDocumentRequest):
            """Submit a commissioning document to the CRPT API."""
            result = await self.crpt_client.submit(payload.document, payload.signature)
            return JSONResponse(
                status_code=200 if result.success else 502,
                content=result.model_dump(),
            )

        @self.app.get("/api/v1/rate-limit")
        async def get_rate_limit():
            """Report the configured submission budget."""
            return {
                "request_limit": self.gate.request_limit,
                "request_interval_ms": self.gate.request_interval_ms,
            }


def create_app():
    """Create FastAPI application."""
    service = CommissioningService()
    return service.app


if __name__ == "__main__":
    service = CommissioningService()
    service.run()
