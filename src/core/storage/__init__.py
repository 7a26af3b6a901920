# -*- coding: utf-8 -*-
"""Blob Backend (원격 오브젝트 스토리지 / 로컬 파일시스템)"""
from src.core.storage.base import BlobBackend, BlobStream, StorageKind, StorageLocator
from src.core.storage.factory import StorageSettings, build_blob_backend, get_blob_backend
from src.core.storage.local_backend import LocalBlobBackend
from src.core.storage.minio_backend import MinioBlobBackend

__all__ = [
    "BlobBackend",
    "BlobStream",
    "StorageKind",
    "StorageLocator",
    "StorageSettings",
    "build_blob_backend",
    "get_blob_backend",
    "LocalBlobBackend",
    "MinioBlobBackend",
]
