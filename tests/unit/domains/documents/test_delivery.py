# -*- coding: utf-8 -*-
"""문서 전달(다운로드/보기) 단위 테스트"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from minio.error import InvalidResponseError
from urllib3.exceptions import ProtocolError
from fastapi.responses import RedirectResponse, StreamingResponse

from src.core.exception import (
    BackendTransientError,
    BlobNotFoundError,
    ForbiddenException,
)
from src.core.storage import StorageKind, StorageLocator
from src.domains.access.policy import Operation
from src.domains.documents.delivery import Disposition, DocumentDeliveryService, stream_blob_response
from src.domains.documents.service import DocumentService
from src.domains.documents.validation import UploadLimits


def make_document(locator, name="transcript.pdf", media_kind="transcript", owner_id=1):
    document = MagicMock()
    document.document_id = 1
    document.name = name
    document.media_kind = media_kind
    document.owner_id = owner_id
    document.storage_locator = locator
    return document


class TestDeliverFromLocal:

    @pytest.mark.asyncio
    async def test_download_streams_with_attachment_header(self, local_backend, student_a_ctx):
        """transcript.pdf 다운로드 → application/pdf + attachment"""
        locator = local_backend.put(b"%PDF-1.4 transcript", "transcript.pdf", prefix="documents/1")
        document_service = AsyncMock()
        document_service.get_document.return_value = make_document(locator)
        delivery = DocumentDeliveryService(document_service, local_backend)

        response = await delivery.deliver(student_a_ctx, 1, Disposition.ATTACHMENT)

        assert isinstance(response, StreamingResponse)
        assert response.media_type == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="transcript.pdf"'
        assert response.headers["content-length"] == "19"
        document_service.get_document.assert_awaited_once_with(student_a_ctx, 1, Operation.DOWNLOAD)
        await response.background()

    @pytest.mark.asyncio
    async def test_view_uses_inline(self, local_backend, student_a_ctx):
        locator = local_backend.put(b"\x89PNG", "photo.png")
        document_service = AsyncMock()
        document_service.get_document.return_value = make_document(locator, name="photo.png", media_kind="png")
        delivery = DocumentDeliveryService(document_service, local_backend)

        response = await delivery.deliver(student_a_ctx, 1, Disposition.INLINE)

        assert response.media_type == "image/png"
        assert response.headers["content-disposition"].startswith("inline;")
        document_service.get_document.assert_awaited_once_with(student_a_ctx, 1, Operation.VIEW)
        await response.background()

    @pytest.mark.asyncio
    async def test_missing_local_file(self, local_backend, student_a_ctx):
        """메타데이터는 있지만 파일이 없으면 BlobNotFoundError (리다이렉트 없음)"""
        locator = StorageLocator(StorageKind.LOCAL, "documents/1/gone.pdf")
        document_service = AsyncMock()
        document_service.get_document.return_value = make_document(locator)
        delivery = DocumentDeliveryService(document_service, local_backend)

        with pytest.raises(BlobNotFoundError):
            await delivery.deliver(student_a_ctx, 1, Disposition.ATTACHMENT)

    @pytest.mark.asyncio
    async def test_policy_denial_propagates(self, local_backend, student_b_ctx):
        document_service = AsyncMock()
        document_service.get_document.side_effect = ForbiddenException()
        delivery = DocumentDeliveryService(document_service, local_backend)

        with pytest.raises(ForbiddenException):
            await delivery.deliver(student_b_ctx, 1, Disposition.ATTACHMENT)


class TestSignedUrlFallback:

    @pytest.mark.asyncio
    async def test_transient_error_redirects_to_signed_url(self):
        """원격 스트리밍 일시 오류 → 서명 URL 302 리다이렉트"""
        backend = MagicMock()
        backend.supports_signed_access = True
        backend.open_stream.side_effect = BackendTransientError()
        backend.get_signed_access.return_value = "https://s3.test/signed"
        locator = StorageLocator(StorageKind.REMOTE, "documents/1/a.pdf")

        response = await stream_blob_response(
            backend, locator, "application/pdf", 'attachment; filename="a.pdf"', 300
        )

        assert isinstance(response, RedirectResponse)
        assert response.status_code == 302
        assert response.headers["location"] == "https://s3.test/signed"
        args = backend.get_signed_access.call_args.args
        assert args[1] == 300
        assert args[2]["response-content-disposition"] == 'attachment; filename="a.pdf"'

    @pytest.mark.asyncio
    async def test_transient_error_without_signed_access(self):
        backend = MagicMock()
        backend.supports_signed_access = False
        backend.open_stream.side_effect = BackendTransientError()

        with pytest.raises(BackendTransientError):
            await stream_blob_response(
                backend,
                StorageLocator(StorageKind.LOCAL, "a.pdf"),
                "application/pdf",
                "attachment",
            )

    @pytest.mark.asyncio
    async def test_not_found_is_not_redirected(self):
        backend = MagicMock()
        backend.supports_signed_access = True
        backend.open_stream.side_effect = BlobNotFoundError()

        with pytest.raises(BlobNotFoundError):
            await stream_blob_response(
                backend,
                StorageLocator(StorageKind.REMOTE, "a.pdf"),
                "application/pdf",
                "attachment",
            )
        backend.get_signed_access.assert_not_called()


class TestRemoteDeliveryFallback:
    """원격 저장소 SDK 오류 → 저장소 예외 → 서명 URL 리다이렉트"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ProtocolError("connection reset"),
            InvalidResponseError(429, "text/html", "Too Many Requests"),
        ],
    )
    async def test_streaming_failure_redirects(
        self, error, remote_backend, mock_minio_client, mock_document_repository, student_a_ctx, upload_file_factory
    ):
        service = DocumentService(
            mock_document_repository,
            remote_backend,
            upload_limits=UploadLimits.create(1024, ["pdf"]),
        )
        delivery = DocumentDeliveryService(service, remote_backend, signed_url_ttl=300)
        document = await service.upload_document(
            student_a_ctx,
            upload_file_factory("transcript.pdf", b"%PDF-1.4", "application/pdf"),
            media_kind="transcript",
        )
        mock_minio_client.get_object.side_effect = error

        response = await delivery.deliver(student_a_ctx, document.document_id, Disposition.ATTACHMENT)

        assert isinstance(response, RedirectResponse)
        assert response.status_code == 302
        assert response.headers["location"] == "https://s3.test/bucket/key?X-Amz-Signature=abc"
        kwargs = mock_minio_client.presigned_get_object.call_args.kwargs
        assert kwargs["object_name"] == document.storage_locator.key
        assert kwargs["response_headers"] == {
            "response-content-type": "application/pdf",
            "response-content-disposition": 'attachment; filename="transcript.pdf"',
        }

    @pytest.mark.asyncio
    async def test_missing_remote_object_is_not_redirected(
        self, remote_backend, mock_minio_client, mock_document_repository, student_a_ctx, mock_upload_file
    ):
        from minio.error import S3Error

        service = DocumentService(
            mock_document_repository,
            remote_backend,
            upload_limits=UploadLimits.create(1024, ["pdf"]),
        )
        delivery = DocumentDeliveryService(service, remote_backend)
        document = await service.upload_document(student_a_ctx, mock_upload_file)
        mock_minio_client.get_object.side_effect = S3Error(
            code="NoSuchKey",
            message="missing",
            resource="/bucket/key",
            request_id="req-1",
            host_id="host-1",
            response=MagicMock(),
        )

        with pytest.raises(BlobNotFoundError):
            await delivery.deliver(student_a_ctx, document.document_id, Disposition.INLINE)
        mock_minio_client.presigned_get_object.assert_not_called()
