import io
import os

import pytest

from adstool.core.config import AdsConfig
from adstool.utils import immutable_logger


class _StreamWriter(io.BytesIO):
    def __init__(self, store, key, name):
        super().__init__()
        self._store, self._key, self._name = store, key, name

    def close(self):
        if not self.closed:
            self._store.setdefault(self._key, {})[self._name] = self.getvalue()
        super().close()


class FakeStreamBackend:
    """In-memory named streams attached to real files on disk."""

    def __init__(self, case_insensitive=False):
        self.case_insensitive = case_insensitive
        self.streams = {}
        self.fail_read = set()
        self.fail_write = set()
        self.fail_remove = set()

    def _key(self, path):
        return os.path.abspath(path)

    def attach(self, path, name, data: bytes):
        self.streams.setdefault(self._key(path), {})[name] = data

    def _resolve(self, key, name):
        """Map name onto an existing stream the way NTFS does when case-insensitive."""
        if self.case_insensitive:
            for existing in self.streams.get(key, {}):
                if existing.casefold() == name.casefold():
                    return existing
        return name

    def get(self, path, name):
        key = self._key(path)
        return self.streams.get(key, {}).get(self._resolve(key, name))

    def list_streams(self, path):
        if not os.path.isfile(path):
            raise FileNotFoundError(2, "No such file", path)
        out = [("::$DATA", os.path.getsize(path))]
        for name, data in self.streams.get(self._key(path), {}).items():
            out.append((f":{name}:$DATA", len(data)))
        return out

    def open_stream(self, path, name, mode="rb"):
        key = self._key(path)
        if "r" in mode:
            if name in self.fail_read:
                raise PermissionError(13, "Access is denied", f"{path}:{name}")
            if name not in self.streams.get(key, {}):
                raise FileNotFoundError(2, "No such stream", f"{path}:{name}")
            return io.BytesIO(self.streams[key][name])
        if name in self.fail_write:
            raise OSError(28, "No space left on device", f"{path}:{name}")
        return _StreamWriter(self.streams, key, self._resolve(key, name))

    def remove_stream(self, path, name):
        if name in self.fail_remove:
            raise PermissionError(32, "The file is in use by another process", f"{path}:{name}")
        try:
            del self.streams[self._key(path)][name]
        except KeyError:
            raise FileNotFoundError(2, "No such stream", f"{path}:{name}")


@pytest.fixture
def backend():
    return FakeStreamBackend()


@pytest.fixture
def ntfs_like_backend():
    return FakeStreamBackend(case_insensitive=True)


@pytest.fixture(autouse=True)
def audit_log(tmp_path, monkeypatch):
    """Keep the audit log and reports inside the test's temp dir."""
    config = AdsConfig(output_dir=str(tmp_path / "ADSOutput"),
                       log_dir=str(tmp_path / "logs"),
                       reports_dir=str(tmp_path / "reports"),
                       hmac_key="test-key")
    monkeypatch.setenv("ADSTOOL_LOG_DIR", config.log_dir)
    monkeypatch.setenv("ADSTOOL_REPORTS_DIR", config.reports_dir)
    monkeypatch.setenv("ADSTOOL_HMAC_KEY", config.hmac_key)
    immutable_logger.configure(config)
    return config


@pytest.fixture
def doc(tmp_path, backend):
    """doc.txt: 500 bytes of content and a 120 byte secret.txt stream."""
    path = tmp_path / "doc.txt"
    path.write_bytes(b"d" * 500)
    backend.attach(str(path), "secret.txt", b"s" * 120)
    return str(path)
