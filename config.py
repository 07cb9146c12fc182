import logging
import os
import yaml
import keyring

APP_VERSION = "1.0.0"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    """Install the default log format once; level falls back to ``LOG_LEVEL``."""
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)


class YamlConfig:
    """Settings file in YAML; secrets go to the OS keyring when encryption is on.

    With ``ENCRYPT_SETTINGS=1`` every key in :attr:`SENSITIVE_KEYS` is written
    to the keyring and the file only keeps ``true`` as a marker.
    """

    SENSITIVE_KEYS = {"gemini_api_key"}

    def __init__(self, path: str = "settings.yaml", service: str = "gymtrack") -> None:
        self.path = path
        self.service = service
        self.encrypt = os.environ.get("ENCRYPT_SETTINGS") == "1"

    def _reveal(self, data: dict) -> dict:
        for key in self.SENSITIVE_KEYS & set(data):
            secret = keyring.get_password(self.service, key)
            if secret is None:
                logger.warning("no keyring entry for %s; ignoring it", key)
                del data[key]
            else:
                data[key] = secret
        return data

    def _conceal(self, data: dict) -> dict:
        for key in self.SENSITIVE_KEYS & set(data):
            keyring.set_password(self.service, key, str(data[key]))
            data[key] = True
        return data

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return self._reveal(data) if self.encrypt else data

    def save(self, data: dict) -> None:
        out = self._conceal(dict(data)) if self.encrypt else dict(data)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f, allow_unicode=True)
