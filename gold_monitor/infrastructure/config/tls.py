"""
TLS material for the HTTPS listener.

HTTPS is enabled only when both TLS_KEY_FILE and TLS_CERT_FILE are readable.
Unreadable files are logged and the listener is skipped rather than failing
the whole process; plain HTTP may still be serving.
"""

import atexit
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gold_monitor.infrastructure.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TLSConfig:
    keyfile: str
    certfile: str
    password: Optional[str] = None
    ca_certs: Optional[str] = None

    def uvicorn_kwargs(self) -> dict:
        kwargs = {"ssl_keyfile": self.keyfile, "ssl_certfile": self.certfile}
        if self.password:
            kwargs["ssl_keyfile_password"] = self.password
        if self.ca_certs:
            kwargs["ssl_ca_certs"] = self.ca_certs
        return kwargs


def _resolve(path: str, cwd: Path) -> Path:
    candidate = Path(path).expanduser()
    return candidate if candidate.is_absolute() else cwd / candidate


def _read(label: str, path: str, cwd: Path) -> Optional[tuple[Path, bytes]]:
    resolved = _resolve(path, cwd)
    try:
        return resolved, resolved.read_bytes()
    except OSError as exc:
        logger.error("Failed to read %s at %s: %s", label, resolved, exc)
        return None


def _write_ca_bundle(chunks: list[bytes]) -> str:
    # uvicorn takes a single ssl_ca_certs path
    bundle = tempfile.NamedTemporaryFile(prefix="gold-monitor-ca-", suffix=".pem", delete=False)
    with bundle:
        for chunk in chunks:
            bundle.write(chunk.rstrip(b"\n") + b"\n")
    atexit.register(Path(bundle.name).unlink, missing_ok=True)
    return bundle.name


def load_tls_config(settings: Settings, cwd: Optional[Path] = None) -> Optional[TLSConfig]:
    """Return the TLS configuration, or None when HTTPS should stay off."""
    if not settings.tls_key_file or not settings.tls_cert_file:
        return None
    cwd = cwd or Path.cwd()

    key = _read("TLS key", settings.tls_key_file, cwd)
    cert = _read("TLS certificate", settings.tls_cert_file, cwd)
    if key is None or cert is None:
        logger.warning("TLS key or certificate could not be loaded; HTTPS server will not start.")
        return None

    ca_files = [
        loaded
        for loaded in (_read("TLS CA bundle", entry, cwd) for entry in settings.tls_ca_files)
        if loaded is not None
    ]
    if not ca_files:
        ca_certs = None
    elif len(ca_files) == 1:
        ca_certs = str(ca_files[0][0])
    else:
        ca_certs = _write_ca_bundle([content for _, content in ca_files])

    return TLSConfig(
        keyfile=str(key[0]),
        certfile=str(cert[0]),
        password=settings.tls_passphrase,
        ca_certs=ca_certs,
    )
