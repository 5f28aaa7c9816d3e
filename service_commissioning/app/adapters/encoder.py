"""
Request encoding for the CRPT commissioning endpoint.
"""

import base64
from typing import List, Tuple
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from shared.errors import UnsupportedFormatError, ValidationError
from service_commissioning.app.domain.models import Document, DocumentFormat, DocumentType

DOCUMENT_FORMATS = {
    DocumentType.LP_INTRODUCE_GOODS.value: DocumentFormat.MANUAL,
    DocumentType.LP_INTRODUCE_GOODS_CSV.value: DocumentFormat.CSV,
    DocumentType.LP_INTRODUCE_GOODS_XML.value: DocumentFormat.XML,
}


class EncodedRequest(BaseModel):
    """Form fields of one commissioning request."""

    model_config = ConfigDict(frozen=True)

    document_format: DocumentFormat
    product_document: str
    signature: str
    type: str

    def form_fields(self) -> List[Tuple[str, str]]:
        return [
            ("document_format", self.document_format.value),
            ("product_document", self.product_document),
            ("signature", self.signature),
            ("type", self.type),
        ]

    def form_body(self) -> bytes:
        """URL-encoded form body, UTF-8."""
        return urlencode(self.form_fields(), encoding="utf-8").encode("utf-8")


def get_document_format(document: Document) -> DocumentFormat:
    """Map ``doc_type`` to its document format."""
    try:
        return DOCUMENT_FORMATS[document.doc_type]
    except KeyError:
        raise UnsupportedFormatError(document.doc_type, details={"doc_id": document.doc_id}) from None


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encode_request(document: Document, signature: str, document_format: DocumentFormat) -> EncodedRequest:
    try:
        product_document = _b64(document.to_json().encode("utf-8"))
        encoded_signature = _b64(signature.encode("utf-8"))
    except UnicodeEncodeError as e:
        raise ValidationError(
            "Document or signature is not valid UTF-8 text",
            details={"doc_id": document.doc_id, "error": str(e)},
        ) from e

    return EncodedRequest(
        document_format=document_format,
        product_document=product_document,
        signature=encoded_signature,
        type=document.doc_type,
    )
