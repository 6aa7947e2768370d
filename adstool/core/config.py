# core/config.py
import os
from dataclasses import dataclass, field

DEFAULT_OUTPUT_DIR = "ADSOutput"
# In production the key must come from a secret store. This is a demo key.
DEFAULT_HMAC_KEY = "replace-with-secure-key"


def _cwd_dir(name):
    return os.path.join(os.getcwd(), name)


@dataclass
class AdsConfig:
    output_dir: str = DEFAULT_OUTPUT_DIR
    log_dir: str = field(default_factory=lambda: _cwd_dir("logs"))
    reports_dir: str = field(default_factory=lambda: _cwd_dir("reports"))
    hmac_key: str = DEFAULT_HMAC_KEY

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            output_dir=env.get("ADSTOOL_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
            log_dir=env.get("ADSTOOL_LOG_DIR") or _cwd_dir("logs"),
            reports_dir=env.get("ADSTOOL_REPORTS_DIR") or _cwd_dir("reports"),
            hmac_key=env.get("ADSTOOL_HMAC_KEY", DEFAULT_HMAC_KEY),
        )
