# ==== VENDOR VERIFICATION RULE ==== #

"""
Vendor document-completeness verification.

A vendor is verified exactly when every required document type is among
the document types attached to it. The status is always re-derived from
the full attachment set, so it flips back when a required document is
removed.
"""

from enum import Enum
from typing import Iterable, Optional


class VerificationStatus(str, Enum):
    """Vendor compliance status as stored in ``vendor.status_verifikasi``."""
    VERIFIED = "Terverifikasi"
    UNVERIFIED = "Belum terverifikasi"


DEFAULT_REQUIRED_DOCUMENTS = frozenset({
    "NPWP_FILE",
    "KTP_DIREKTUR_FILE",
    "SURAT_PERNYATAAN_FILE",
    "AKTA_PENDIRIAN_FILE",
    "NIB_FILE",
})


def normalize_document_types(document_types: Iterable[Optional[str]]) -> frozenset[str]:
    """Uppercase, strip and de-duplicate document types, dropping blanks."""
    return frozenset(
        doc.strip().upper()
        for doc in document_types
        if doc and doc.strip()
    )


def missing_documents(
    uploaded_document_types: Iterable[Optional[str]],
    required_document_types: Iterable[str] = DEFAULT_REQUIRED_DOCUMENTS
) -> frozenset[str]:
    """Required document types not present in the uploaded set."""
    required = normalize_document_types(required_document_types)
    return required - normalize_document_types(uploaded_document_types)


def evaluate_vendor_verification(
    uploaded_document_types: Iterable[Optional[str]],
    required_document_types: Iterable[str] = DEFAULT_REQUIRED_DOCUMENTS
) -> VerificationStatus:
    """
    Decide a vendor's verification status from its attached document types.

    Args:
        uploaded_document_types: Document types currently attached to the vendor
        required_document_types: Document types that must all be present

    Returns:
        VerificationStatus: VERIFIED when the required set is a subset of the
        uploaded set, UNVERIFIED otherwise
    """
    if missing_documents(uploaded_document_types, required_document_types):
        return VerificationStatus.UNVERIFIED
    return VerificationStatus.VERIFIED
