"""Unit tests for the vendor document verification rule."""

import pytest

from procurement.business.vendor_verification import (
    DEFAULT_REQUIRED_DOCUMENTS,
    VerificationStatus,
    evaluate_vendor_verification,
    missing_documents,
    normalize_document_types,
)


@pytest.mark.unit
class TestEvaluateVendorVerification:
    """Test cases for verification status evaluation."""

    def test_partial_documents_are_unverified(self, required_documents):
        status = evaluate_vendor_verification(
            {"NPWP_FILE", "KTP_DIREKTUR_FILE"}, required_documents
        )

        assert status is VerificationStatus.UNVERIFIED
        assert status.value == "Belum terverifikasi"

    def test_all_documents_with_duplicates_are_verified(self, required_documents):
        uploaded = required_documents + ["NPWP_FILE", "NPWP_FILE"]

        status = evaluate_vendor_verification(uploaded, required_documents)

        assert status is VerificationStatus.VERIFIED
        assert status.value == "Terverifikasi"

    def test_extra_document_types_do_not_matter(self, required_documents):
        uploaded = required_documents + ["SIUP_FILE", None]

        assert evaluate_vendor_verification(uploaded, required_documents) is VerificationStatus.VERIFIED

    def test_no_documents_is_unverified(self):
        assert evaluate_vendor_verification([]) is VerificationStatus.UNVERIFIED

    def test_removing_a_document_reverts_status(self, required_documents):
        """The rule works both ways: losing a document unverifies the vendor."""
        full = set(required_documents)
        assert evaluate_vendor_verification(full, required_documents) is VerificationStatus.VERIFIED

        full.discard("NIB_FILE")
        assert evaluate_vendor_verification(full, required_documents) is VerificationStatus.UNVERIFIED

    def test_document_types_compare_case_insensitively(self, required_documents):
        uploaded = [doc.lower() for doc in required_documents]

        assert evaluate_vendor_verification(uploaded, required_documents) is VerificationStatus.VERIFIED

    def test_custom_required_set(self):
        status = evaluate_vendor_verification({"NPWP_FILE"}, {"NPWP_FILE"})

        assert status is VerificationStatus.VERIFIED

    def test_empty_required_set_always_verifies(self):
        assert evaluate_vendor_verification([], set()) is VerificationStatus.VERIFIED

    def test_default_required_set(self, required_documents):
        assert DEFAULT_REQUIRED_DOCUMENTS == frozenset(required_documents)
        assert evaluate_vendor_verification(required_documents) is VerificationStatus.VERIFIED


@pytest.mark.unit
class TestMissingDocuments:
    """Test cases for the missing-document helper."""

    def test_lists_missing_types(self, required_documents):
        missing = missing_documents({"NPWP_FILE", "KTP_DIREKTUR_FILE"}, required_documents)

        assert missing == {"SURAT_PERNYATAAN_FILE", "AKTA_PENDIRIAN_FILE", "NIB_FILE"}

    def test_nothing_missing(self, required_documents):
        assert missing_documents(required_documents, required_documents) == frozenset()

    def test_normalize_drops_blanks(self):
        assert normalize_document_types([" npwp_file ", "", None, "NPWP_FILE"]) == {"NPWP_FILE"}
