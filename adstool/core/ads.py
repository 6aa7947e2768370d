# core/ads.py
import os
import sys
from dataclasses import dataclass
from typing import List, Tuple

from adstool.core.errors import IOFailure, NotFoundError, UnsupportedPlatformError

if sys.platform.startswith("win"):
    import ctypes
    from ctypes import wintypes

PRIMARY_STREAM = ":$DATA"

ERROR_FILE_NOT_FOUND = 2
ERROR_PATH_NOT_FOUND = 3
ERROR_HANDLE_EOF = 38


@dataclass(frozen=True)
class StreamRecord:
    host_file: str
    stream_name: str
    length: int
    is_primary: bool = False

    def to_dict(self):
        return {
            "hostFile": self.host_file,
            "streamName": self.stream_name,
            "length": self.length,
            "isPrimary": self.is_primary,
        }


def parse_stream_name(raw: str) -> Tuple[str, bool]:
    """
    Reduce an OS stream name to (name, is_primary).
    '::$DATA' -> (':$DATA', True), ':secret.txt:$DATA' -> ('secret.txt', False)
    """
    parts = raw.split(":")
    if len(parts) >= 3 and parts[0] == "":
        name, stype = ":".join(parts[1:-1]), parts[-1]
    else:
        name, stype = raw.lstrip(":"), "$DATA"
    if name == "" and stype == "$DATA":
        return PRIMARY_STREAM, True
    if stype != "$DATA":
        name = f"{name}:{stype}"
    return name, False


class NtfsStreamBackend:
    """
    Stream primitives over the Win32 API.
    Enumeration uses FindFirstStreamW/FindNextStreamW; content access goes
    through the 'path:stream' syntax that NTFS accepts in CreateFileW.
    """

    def _require_windows(self, path):
        if not sys.platform.startswith("win"):
            raise UnsupportedPlatformError(
                "NTFS alternate data streams are only available on Windows", path=path)

    @staticmethod
    def stream_path(path: str, name: str) -> str:
        return f"{path}:{name}"

    def list_streams(self, path: str) -> List[Tuple[str, int]]:
        """Return [(raw_name, size)], e.g. [('::$DATA', 500), (':secret.txt:$DATA', 120)]."""
        self._require_windows(path)
        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)

        class WIN32_FIND_STREAM_DATA(ctypes.Structure):
            _fields_ = [("StreamSize", ctypes.c_longlong),
                        ("cStreamName", wintypes.WCHAR * 296)]

        find_first = kernel32.FindFirstStreamW
        find_first.argtypes = [wintypes.LPCWSTR, ctypes.c_int, ctypes.c_void_p, wintypes.DWORD]
        find_first.restype = wintypes.HANDLE
        find_next = kernel32.FindNextStreamW
        find_next.argtypes = [wintypes.HANDLE, ctypes.c_void_p]
        find_next.restype = wintypes.BOOL
        find_close = kernel32.FindClose
        find_close.argtypes = [wintypes.HANDLE]

        data = WIN32_FIND_STREAM_DATA()
        h = find_first(os.path.abspath(path), 0, ctypes.byref(data), 0)
        if h is None or h == ctypes.c_void_p(-1).value:
            err = ctypes.get_last_error()
            if err == ERROR_HANDLE_EOF:
                return []
            cause = ctypes.WinError(err)
            if err in (ERROR_FILE_NOT_FOUND, ERROR_PATH_NOT_FOUND):
                raise NotFoundError("file not found", path=path, cause=cause)
            raise IOFailure("cannot enumerate streams", path=path, cause=cause)
        streams = []
        try:
            while True:
                streams.append((data.cStreamName, int(data.StreamSize)))
                if not find_next(h, ctypes.byref(data)):
                    err = ctypes.get_last_error()
                    if err != ERROR_HANDLE_EOF:
                        raise IOFailure("stream enumeration interrupted", path=path,
                                        cause=ctypes.WinError(err))
                    break
        finally:
            find_close(h)
        return streams

    def open_stream(self, path: str, name: str, mode: str = "rb"):
        self._require_windows(path)
        return open(self.stream_path(path, name), mode)

    def remove_stream(self, path: str, name: str):
        self._require_windows(path)
        os.remove(self.stream_path(path, name))


def get_backend():
    return NtfsStreamBackend()


def enumerate_streams(path: str, backend=None) -> List[StreamRecord]:
    """
    Enumerate every stream of a file, the primary one included.
    Raises NotFoundError when the path is not an existing file.
    """
    backend = backend or get_backend()
    if not os.path.isfile(path):
        raise NotFoundError("file not found", path=path)
    host = os.path.basename(path)
    records = []
    try:
        raw_streams = backend.list_streams(path)
    except FileNotFoundError as e:
        raise NotFoundError("file not found", path=path, cause=e) from e
    except OSError as e:
        raise IOFailure("cannot enumerate streams", path=path, cause=e) from e
    for raw, size in raw_streams:
        name, primary = parse_stream_name(raw)
        records.append(StreamRecord(host_file=host, stream_name=name,
                                    length=int(size), is_primary=primary))
    return records


def named_streams(records: List[StreamRecord]) -> List[StreamRecord]:
    return [r for r in records if not r.is_primary]
