"""
Media storage dependency
"""

from fastapi import Request

from .s3_client import S3Client, get_s3_client


def get_file_storage(request: Request) -> S3Client:
    """
    Storage used by upload routes.

    An instance placed on ``app.state.media_storage`` wins; otherwise the
    lazily created S3 client is used.
    """
    storage = getattr(request.app.state, "media_storage", None)
    if storage is not None:
        return storage
    return get_s3_client()
