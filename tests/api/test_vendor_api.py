"""API tests for vendor endpoints and document-driven verification."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from procurement.storage.models import Attachment, Vendor


REPO = "procurement.storage.repositories"


def pdf(name: str) -> tuple[str, bytes, str]:
    return name, b"%PDF-1.4", "application/pdf"


@pytest.mark.api
class TestVendorReads:
    """Test vendor list and detail endpoints."""

    async def test_list_includes_category_name(self, client):
        rows = [{
            "id_vendor": 1,
            "nama_pt_cv": "PT Maju Jaya",
            "nama_vendor": "Maju",
            "id_kategori": 2,
            "nama_kategori": "Percetakan",
            "alamat": None,
            "no_pic": "0812",
            "nama_pic": "Budi",
            "status_verifikasi": "Belum terverifikasi",
        }]

        with patch(f"{REPO}.list_vendors", AsyncMock(return_value=rows)):
            response = await client.get("/api/vendor")

        assert response.status_code == 200
        assert response.json()[0]["nama_kategori"] == "Percetakan"

    async def test_detail_lists_attachments_and_missing_documents(self, client):
        vendor = Vendor(id_vendor=1, nama_pt_cv="PT Maju Jaya", status_verifikasi="Belum terverifikasi")
        attachments = [
            Attachment(id_attachment=11, file_path="NPWP_FILE-2.pdf", original_name="npwp.pdf",
                       document_type="NPWP_FILE", related_table="vendor", related_id_int=1),
            Attachment(id_attachment=10, file_path="attachments-1.pdf", original_name="profil.pdf",
                       document_type=None, related_table="vendor", related_id_int=1),
        ]

        with patch(f"{REPO}.get_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.list_attachments", AsyncMock(return_value=attachments)) as list_attachments:
            response = await client.get("/api/vendor/1")

        assert response.status_code == 200
        data = response.json()
        assert [a["id_attachment"] for a in data["attachments"]] == [11, 10]
        assert data["missing_documents"] == [
            "AKTA_PENDIRIAN_FILE", "KTP_DIREKTUR_FILE", "NIB_FILE", "SURAT_PERNYATAAN_FILE"
        ]
        list_attachments.assert_awaited_once()
        assert list_attachments.await_args.args[1:] == ("vendor", 1)

    async def test_detail_missing_vendor(self, client):
        with patch(f"{REPO}.get_vendor", AsyncMock(return_value=None)):
            response = await client.get("/api/vendor/5")

        assert response.status_code == 404
        assert response.json()["detail"] == "Vendor tidak ditemukan"


@pytest.mark.api
class TestVendorWrites:
    """Test multipart vendor creation and updates."""

    async def test_create_with_all_documents_is_verified(
        self, client, db_session, file_store, required_documents
    ):
        vendor = Vendor(id_vendor=7, nama_pt_cv="PT Maju Jaya")
        files = [(doc, pdf(f"{doc.lower()}.pdf")) for doc in required_documents]

        with patch(f"{REPO}.create_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.add_attachments", AsyncMock()) as add, \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set(required_documents))):
            response = await client.post(
                "/api/vendor",
                data={"nama_pt_cv": "PT Maju Jaya", "status_verifikasi": "Terverifikasi"},
                files=files,
            )

        assert response.status_code == 201
        assert response.json() == {
            "id_vendor": 7,
            "status_verifikasi": "Terverifikasi",
            "message": "Vendor berhasil dibuat",
        }
        stored = add.await_args.args[3]
        assert len(stored) == 5
        assert all((file_store.root / item.file_path).exists() for item in stored)
        db_session.commit.assert_awaited()

    async def test_create_with_partial_documents_is_unverified(self, client):
        vendor = Vendor(id_vendor=8, nama_pt_cv="PT Baru")
        files = [("NPWP_FILE", pdf("npwp.pdf")), ("KTP_DIREKTUR_FILE", pdf("ktp.pdf"))]

        with patch(f"{REPO}.create_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.add_attachments", AsyncMock()), \
             patch(f"{REPO}.vendor_document_types",
                   AsyncMock(return_value={"NPWP_FILE", "KTP_DIREKTUR_FILE"})):
            response = await client.post("/api/vendor", data={"nama_pt_cv": "PT Baru"}, files=files)

        assert response.status_code == 201
        assert response.json()["status_verifikasi"] == "Belum terverifikasi"

    async def test_failed_commit_removes_stored_documents(
        self, client, db_session, file_store, required_documents
    ):
        vendor = Vendor(id_vendor=9, nama_pt_cv="PT Gagal")
        files = [(doc, pdf(f"{doc.lower()}.pdf")) for doc in required_documents]
        db_session.commit.side_effect = IntegrityError("INSERT INTO attachments", {}, Exception("duplicate"))

        with patch(f"{REPO}.create_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.add_attachments", AsyncMock()) as add, \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set(required_documents))):
            response = await client.post("/api/vendor", data={"nama_pt_cv": "PT Gagal"}, files=files)

        assert response.status_code == 409
        assert len(add.await_args.args[3]) == 5
        assert list(file_store.root.iterdir()) == []

    async def test_create_requires_company_name(self, client):
        response = await client.post("/api/vendor", data={"nama_vendor": "Tanpa PT"})

        assert response.status_code == 422

    async def test_too_many_files_rejected(self, client):
        files = [("attachments", pdf(f"lampiran-{i}.pdf")) for i in range(11)]

        with patch(f"{REPO}.create_vendor", AsyncMock()) as create:
            response = await client.post("/api/vendor", data={"nama_pt_cv": "PT X"}, files=files)

        assert response.status_code == 400
        create.assert_not_awaited()

    async def test_update_keeps_blank_fields(self, client):
        vendor = Vendor(id_vendor=7, nama_pt_cv="PT Maju Jaya", alamat="Jakarta",
                        status_verifikasi="Belum terverifikasi")

        with patch(f"{REPO}.get_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.add_attachments", AsyncMock()), \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set())):
            response = await client.put(
                "/api/vendor/7",
                data={"nama_pt_cv": "", "alamat": "Bandung"},
            )

        assert response.status_code == 200
        assert response.json()["message"] == "Vendor berhasil diperbarui"
        assert vendor.nama_pt_cv == "PT Maju Jaya"
        assert vendor.alamat == "Bandung"

    async def test_update_accepts_json(self, client):
        vendor = Vendor(id_vendor=7, nama_pt_cv="PT Maju Jaya", status_verifikasi="Belum terverifikasi")

        with patch(f"{REPO}.get_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.add_attachments", AsyncMock()), \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set())):
            response = await client.put("/api/vendor/7", json={"nama_pic": "Sari"})

        assert response.status_code == 200
        assert vendor.nama_pic == "Sari"

    async def test_update_rejects_non_object_json(self, client):
        response = await client.put("/api/vendor/7", json=["nama_pic"])

        assert response.status_code == 400

    async def test_update_missing_vendor(self, client):
        with patch(f"{REPO}.get_vendor", AsyncMock(return_value=None)):
            response = await client.put("/api/vendor/70", data={"alamat": "Bandung"})

        assert response.status_code == 404
