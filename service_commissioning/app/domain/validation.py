"""
Structural rules a commissioning document must satisfy before submission.
"""

from shared.errors import ValidationError

from service_commissioning.app.domain.models import Document

CERTIFICATE_DOCUMENT_TYPES = frozenset({"CONFORMITY_CERTIFICATE", "CONFORMITY_DECLARATION"})
PRODUCTION_TYPES = frozenset({"OWN_PRODUCTION", "CONTRACT_PRODUCTION"})


def validate_document(document: Document) -> None:
    """Raise ``ValidationError`` on the first rule the document breaks."""
    products = document.products
    if products is not None:
        # Only the all-empty case is rejected; both codes together pass.
        if products.uit_code is None and products.uitu_code is None:
            raise ValidationError(
                "One of uit_code or uitu_code is required",
                details={"doc_id": document.doc_id},
            )
        if (
            products.certificate_document is not None
            and products.certificate_document not in CERTIFICATE_DOCUMENT_TYPES
        ):
            raise ValidationError(
                "Invalid mandatory certification document type",
                details={
                    "doc_id": document.doc_id,
                    "certificate_document": products.certificate_document,
                },
            )

    if document.production_type not in PRODUCTION_TYPES:
        raise ValidationError(
            "Invalid production order type",
            details={"doc_id": document.doc_id, "production_type": document.production_type},
        )
