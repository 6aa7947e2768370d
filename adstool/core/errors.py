# core/errors.py
from typing import Optional


class AdsError(Exception):
    """Base error for stream operations. Carries the host path, stream and OS cause."""

    kind = "error"

    def __init__(self, message: str, path: Optional[str] = None,
                 stream_name: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.stream_name = stream_name
        self.cause = cause

    def __str__(self):
        where = self.path or ""
        if self.stream_name:
            where = f"{where}:{self.stream_name}"
        text = f"{where}: {self.message}" if where else self.message
        if self.cause is not None:
            reason = getattr(self.cause, "strerror", None) or str(self.cause)
            text = f"{text} ({reason})"
        return text

    def to_dict(self):
        return {
            "kind": self.kind,
            "message": self.message,
            "path": self.path,
            "stream": self.stream_name,
            "cause": str(self.cause) if self.cause is not None else None,
        }


class NotFoundError(AdsError):
    kind = "not_found"


class DirectoryCreateError(AdsError):
    kind = "directory_create"


class IOFailure(AdsError):
    kind = "io_failure"


class NameCollisionError(AdsError):
    kind = "name_collision"


class UnsupportedPlatformError(AdsError):
    kind = "unsupported_platform"
