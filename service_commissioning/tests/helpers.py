"""
Test helper functions and factory methods for the commissioning service.
"""

import asyncio
from typing import Any, Dict, List

from service_commissioning.app.domain.models import Description, Document, Products


class DocumentFactory:
    """Factory for creating test documents."""

    @staticmethod
    def products(**overrides: Any) -> Products:
        data: Dict[str, Any] = {
            "owner_inn": "7701234567",
            "producer_inn": "7707654321",
            "production_date": "2024-01-15",
            "tnved_code": "6403990000",
            "uit_code": "010461111111111121abcdef",
        }
        data.update(overrides)
        return Products(**data)

    @staticmethod
    def document(**overrides: Any) -> Document:
        data: Dict[str, Any] = {
            "doc_id": "doc-001",
            "doc_status": "DRAFT",
            "doc_type": "LP_INTRODUCE_GOODS",
            "owner_inn": "7701234567",
            "participant_inn": "7701234567",
            "producer_inn": "7707654321",
            "production_date": "2024-01-15",
            "production_type": "OWN_PRODUCTION",
            "description": Description(participant_inn="7701234567"),
            "products": DocumentFactory.products(),
        }
        data.update(overrides)
        return Document(**data)


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)
