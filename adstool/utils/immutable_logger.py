import os
import json
import hmac
import hashlib
from datetime import datetime, timezone
from typing import List, Optional

from adstool.core.config import AdsConfig

_config = AdsConfig.from_env()
# First write failure since the last configure(); later events are still attempted.
_write_error: Optional[OSError] = None


def configure(config: AdsConfig):
    """Point the audit log at the directory and key of `config`."""
    global _config, _write_error
    _config = config
    _write_error = None


def write_error() -> Optional[OSError]:
    return _write_error


def log_file() -> str:
    return os.path.join(_config.log_dir, "audit.log")


def _sign(raw: str) -> str:
    return hmac.new(_config.hmac_key.encode(), raw.encode(), hashlib.sha256).hexdigest()


def append_log(event: dict):
    """
    Append event with timestamp and hmac signature. File is append-only.
    An unwritable log never interrupts the caller; see write_error().
    """
    global _write_error
    event = dict(event)  # copy
    event["timestamp_utc"] = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    raw = json.dumps(event, separators=(",", ":"), sort_keys=True)
    record = {"payload": event, "hmac_sha256": _sign(raw)}
    try:
        os.makedirs(_config.log_dir, exist_ok=True)
        with open(log_file(), "a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")
    except OSError as e:
        if _write_error is None:
            _write_error = e
    return record


def verify_log(path: Optional[str] = None) -> List[int]:
    """
    Return the 0-based line numbers whose signature does not match their payload.
    """
    path = path or log_file()
    bad = []
    if not os.path.exists(path):
        return bad
    with open(path, "r", encoding="utf-8") as f:
        for n, line in enumerate(f):
            try:
                record = json.loads(line)
                raw = json.dumps(record["payload"], separators=(",", ":"), sort_keys=True)
                if not hmac.compare_digest(_sign(raw), record["hmac_sha256"]):
                    bad.append(n)
            except (ValueError, KeyError, TypeError):
                bad.append(n)
    return bad
