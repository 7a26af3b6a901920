# -*- coding: utf-8 -*-
"""Document 전달 파이프라인 (다운로드 / 브라우저 보기)"""
import enum
import logging

from fastapi import status
from fastapi.responses import RedirectResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from src.core.exception import BackendTransientError
from src.core.storage import BlobBackend, StorageLocator
from src.domains.access.context import RequestContext
from src.domains.access.policy import Operation
from src.domains.documents.media_types import build_content_disposition, resolve_content_type
from src.domains.documents.service import DocumentService

logger = logging.getLogger(__name__)

# 서명 URL 기본 유효 시간 (5분)
DEFAULT_SIGNED_URL_TTL = 300


class Disposition(str, enum.Enum):
    """전달 방식"""
    ATTACHMENT = "attachment"  # 강제 다운로드
    INLINE = "inline"  # 브라우저에서 바로 보기


async def stream_blob_response(
    blob_backend: BlobBackend,
    locator: StorageLocator,
    content_type: str,
    content_disposition: str,
    signed_url_ttl: int = DEFAULT_SIGNED_URL_TTL,
) -> Response:
    """
    저장소 파일을 스트리밍 응답으로 변환

    원격 저장소의 직접 스트리밍이 일시 오류로 실패하면 서명 URL로 리다이렉트한다.
    로컬 파일이 없으면 BlobNotFoundError가 그대로 전파된다.
    """
    try:
        stream = await run_in_threadpool(blob_backend.open_stream, locator)
    except BackendTransientError:
        if not blob_backend.supports_signed_access:
            raise

        logger.warning(f"직접 스트리밍 실패, 서명 URL로 대체: key={locator.key}")
        signed_url = await run_in_threadpool(
            blob_backend.get_signed_access,
            locator,
            signed_url_ttl,
            {
                "response-content-type": content_type,
                "response-content-disposition": content_disposition,
            },
        )
        return RedirectResponse(signed_url, status_code=status.HTTP_302_FOUND)

    headers = {"Content-Disposition": content_disposition}
    if stream.size is not None:
        headers["Content-Length"] = str(stream.size)

    # 응답이 끝나거나 중단되면 스트림 해제 (close는 여러 번 호출해도 안전)
    return StreamingResponse(
        stream,
        media_type=content_type,
        headers=headers,
        background=BackgroundTask(stream.close),
    )


class DocumentDeliveryService:
    """문서 다운로드/보기 처리"""

    def __init__(
        self,
        document_service: DocumentService,
        blob_backend: BlobBackend,
        signed_url_ttl: int = DEFAULT_SIGNED_URL_TTL,
    ):
        self.document_service = document_service
        self.blob_backend = blob_backend
        self.signed_url_ttl = signed_url_ttl

    async def deliver(
        self,
        ctx: RequestContext,
        document_id: int,
        disposition: Disposition,
    ) -> Response:
        """
        문서 전달

        Args:
            ctx: 요청 컨텍스트
            document_id: 문서 ID
            disposition: attachment(다운로드) 또는 inline(보기)

        Returns:
            StreamingResponse 또는 서명 URL RedirectResponse
        """
        operation = Operation.DOWNLOAD if disposition == Disposition.ATTACHMENT else Operation.VIEW
        document = await self.document_service.get_document(ctx, document_id, operation)

        content_type = resolve_content_type(document.media_kind, document.name)
        content_disposition = build_content_disposition(disposition.value, document.name)

        logger.info(
            f"문서 전달: document_id={document_id}, user_id={ctx.user_id}, "
            f"disposition={disposition.value}, content_type={content_type}"
        )
        return await stream_blob_response(
            self.blob_backend,
            document.storage_locator,
            content_type,
            content_disposition,
            self.signed_url_ttl,
        )
