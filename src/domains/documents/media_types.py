# -*- coding: utf-8 -*-
"""확장자 → MIME 타입 변환 및 Content-Disposition 헤더 생성"""
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import quote

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# 전달 시 사용하는 정적 확장자 → MIME 타입 표
CONTENT_TYPES = {
    "pdf": "application/pdf",
    "txt": "text/plain",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


def get_extension(filename: Optional[str]) -> str:
    """파일명에서 확장자 추출 (소문자, 점 없이)"""
    if not filename:
        return ""
    return PurePosixPath(filename).suffix.lower().lstrip(".")


def _normalize_kind(media_kind: Optional[str]) -> str:
    return (media_kind or "").strip().lower().lstrip(".")


def resolve_content_type(media_kind: Optional[str], filename: Optional[str]) -> str:
    """
    문서 유형/파일명으로 Content-Type 결정

    Args:
        media_kind: 업로드 시 선언된 유형 (확장자 또는 "transcript" 같은 분류)
        filename: 원본 파일명

    Returns:
        MIME 타입 (알 수 없으면 application/octet-stream)
    """
    kind = _normalize_kind(media_kind)
    if kind in CONTENT_TYPES:
        return CONTENT_TYPES[kind]
    if kind in CONTENT_TYPES.values():
        return kind
    return CONTENT_TYPES.get(get_extension(filename), DEFAULT_CONTENT_TYPE)


def build_content_disposition(disposition: str, filename: str) -> str:
    """
    Content-Disposition 헤더 값 생성

    ASCII 파일명은 filename="..." 만 사용하고, 한글 등 비 ASCII 파일명은 filename*도 함께 넣는다.
    """
    safe_name = (filename or "download").replace("\\", "\\\\").replace('"', '\\"')
    safe_name = safe_name.replace("\r", "").replace("\n", "")
    try:
        safe_name.encode("ascii")
    except UnicodeEncodeError:
        fallback = safe_name.encode("ascii", "replace").decode("ascii")
        return f"{disposition}; filename=\"{fallback}\"; filename*=utf-8''{quote(filename, safe='')}"
    return f'{disposition}; filename="{safe_name}"'
