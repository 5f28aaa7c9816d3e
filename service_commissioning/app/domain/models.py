"""
Commissioning document records.

The records are immutable pydantic models: they are built once per
submission attempt, compare by value and hash structurally. JSON field names
are the ones the CRPT API expects, including the two camel-case keys
(``participantInn`` on the description and ``importRequest`` on the document).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentFormat(str, Enum):
    """Wire format tag sent as ``document_format``."""

    MANUAL = "MANUAL"
    CSV = "CSV"
    XML = "XML"


class DocumentType(str, Enum):
    """Accepted ``doc_type`` values for goods introduced into circulation."""

    LP_INTRODUCE_GOODS = "LP_INTRODUCE_GOODS"
    LP_INTRODUCE_GOODS_CSV = "LP_INTRODUCE_GOODS_CSV"
    LP_INTRODUCE_GOODS_XML = "LP_INTRODUCE_GOODS_XML"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class Description(_Record):
    """Participant the document is filed for."""

    participant_inn: str = Field(alias="participantInn")


class Products(_Record):
    """Per-item commissioning data."""

    owner_inn: str
    producer_inn: str
    production_date: str
    tnved_code: str

    certificate_document: Optional[str] = None
    certificate_document_date: Optional[str] = None
    certificate_document_number: Optional[str] = None
    uit_code: Optional[str] = None
    uitu_code: Optional[str] = None


class Document(_Record):
    """Goods-commissioning filing."""

    doc_id: str
    doc_status: str
    doc_type: str
    owner_inn: str
    participant_inn: str
    producer_inn: str
    production_date: str
    production_type: str

    description: Optional[Description] = None
    products: Optional[Products] = None
    import_request: Optional[str] = Field(default=None, alias="importRequest")
    reg_date: Optional[str] = None
    reg_number: Optional[str] = None

    def to_json(self) -> str:
        """Serialize with the API field names; absent optionals become null."""
        return self.model_dump_json(by_alias=True)
