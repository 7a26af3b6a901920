import pytest
from datetime import datetime
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock

from src.core.storage import LocalBlobBackend, MinioBlobBackend
from src.domains.access.context import Principal, RequestContext, Role


# ============================================
# Storage Fixtures (로컬 백엔드는 tmp_path에 기록)
# ============================================

@pytest.fixture
def local_backend(tmp_path):
    """테스트마다 새 루트를 쓰는 LocalBlobBackend"""
    return LocalBlobBackend(str(tmp_path / "blobs"))


@pytest.fixture
def mock_minio_client():
    """Minio 클라이언트 Mock 픽스처 (실제 원격 저장소 접근 방지)"""
    mock_client = MagicMock()
    mock_client.bucket_exists.return_value = True
    mock_client.presigned_get_object.return_value = "https://s3.test/bucket/key?X-Amz-Signature=abc"
    return mock_client


@pytest.fixture
def remote_backend(mock_minio_client):
    """Minio 클라이언트 Mock을 사용하는 MinioBlobBackend"""
    return MinioBlobBackend(
        endpoint="s3.test",
        access_key="ak",
        secret_key="sk",
        bucket_name="portal-docs",
        region="ap-northeast-2",
        client=mock_minio_client,
    )


@pytest.fixture(params=["local", "remote"])
def blob_backend(request):
    """로컬/원격 저장소 두 종류로 각각 실행"""
    return request.getfixturevalue(f"{request.param}_backend")


# ============================================
# Request Context Fixtures
# ============================================

@pytest.fixture
def student_a_ctx():
    """학생 A (user_id=10, student_id=1)"""
    return RequestContext(principal=Principal(user_id=10, role=Role.STUDENT), owner_id=1)


@pytest.fixture
def student_b_ctx():
    """학생 B (user_id=20, student_id=2)"""
    return RequestContext(principal=Principal(user_id=20, role=Role.STUDENT), owner_id=2)


@pytest.fixture
def orphan_student_ctx():
    """학생 프로필이 연결되지 않은 학생 계정"""
    return RequestContext(
        principal=Principal(user_id=30, role=Role.STUDENT),
        profile_missing=True,
    )


@pytest.fixture
def advisor_ctx():
    return RequestContext(principal=Principal(user_id=2, role=Role.ADVISOR))


@pytest.fixture
def admin_ctx():
    return RequestContext(principal=Principal(user_id=1, role=Role.ADMIN))


# ============================================
# Upload / Repository Mock Fixtures
# ============================================

def make_upload_file(filename: str, content: bytes, content_type: str):
    """FastAPI UploadFile Mock 생성 (read(size) 호출 지원)"""
    buffer = BytesIO(content)

    async def _read(size: int = -1):
        return buffer.read(size)

    mock_file = MagicMock()
    mock_file.filename = filename
    mock_file.content_type = content_type
    mock_file.read = AsyncMock(side_effect=_read)
    mock_file.file = buffer
    return mock_file


@pytest.fixture
def upload_file_factory():
    """파일명/내용/MIME 타입을 지정해 UploadFile Mock 생성"""
    return make_upload_file


@pytest.fixture
def mock_upload_file():
    """PDF UploadFile Mock 픽스처"""
    return make_upload_file("test_document.pdf", b"%PDF-1.4\nTest PDF content", "application/pdf")


@pytest.fixture
def mock_document_repository():
    """DocumentRepository Mock (create는 전달받은 값으로 문서 객체 생성)"""
    repository = AsyncMock()
    documents = {}

    async def _create(name, locator, media_kind, content_type, file_size_kb, owner_id, uploaded_by):
        document = MagicMock()
        document.document_id = len(documents) + 1
        document.name = name
        document.storage_locator = locator
        document.media_kind = media_kind
        document.content_type = content_type
        document.file_size_kb = file_size_kb
        document.owner_id = owner_id
        document.uploaded_by = uploaded_by
        document.created_at = datetime(2026, 3, 2, 10, 0, 0)
        documents[document.document_id] = document
        return document

    async def _find_by_id(document_id):
        return documents.get(document_id)

    async def _delete(document):
        return documents.pop(document.document_id, None) is not None

    repository.create.side_effect = _create
    repository.find_by_id.side_effect = _find_by_id
    repository.delete.side_effect = _delete
    repository.documents = documents
    return repository
