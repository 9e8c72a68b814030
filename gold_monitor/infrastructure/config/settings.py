"""
Environment configuration.

.env.local (when present) and then .env are loaded with python-dotenv using
override=False: the process environment wins over .env.local, which wins
over .env.
Settings.from_env() is a pure function of the mapping it is given, which keeps
tests independent of the real environment.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from gold_monitor.domain.numbers import parse_finite
from gold_monitor.infrastructure.llm import openai_chat_adapter
from gold_monitor.infrastructure.market_data import okx_adapter

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_PUBLIC_DIR = PACKAGE_ROOT / "public"
DEFAULT_HTTPS_PORT = 3443


def load_env(directory: Optional[Path] = None) -> None:
    directory = directory or Path.cwd()
    local_env = directory / ".env.local"
    if local_env.is_file():
        load_dotenv(local_env, override=False)
    load_dotenv(directory / ".env", override=False)


def _mask(secret: Optional[str], visible: int = 4) -> str:
    if not secret:
        return ""
    if len(secret) <= visible * 2:
        return "***"
    return f"{secret[:visible]}***{secret[-visible:]}"


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _int(environ: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = _get(environ, name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %r", name, raw, default)
        return default


def _float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _get(environ, name)
    if raw is None:
        return default
    value = parse_finite(raw)
    if value is None:
        logger.warning("Ignoring %s=%r: not a finite number, using %r", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    http_port: Optional[int] = None
    https_port: int = DEFAULT_HTTPS_PORT
    host: str = "0.0.0.0"

    okx_instrument: str = okx_adapter.DEFAULT_INSTRUMENT
    okx_base_url: str = okx_adapter.DEFAULT_BASE_URL
    upstream_timeout: float = 10.0

    tls_key_file: Optional[str] = None
    tls_cert_file: Optional[str] = None
    tls_passphrase: Optional[str] = None
    tls_ca_files: tuple[str, ...] = ()

    openai_api_key: Optional[str] = None
    openai_base_url: str = openai_chat_adapter.DEFAULT_BASE_URL
    openai_model: str = openai_chat_adapter.DEFAULT_MODEL
    openai_temperature: float = openai_chat_adapter.DEFAULT_TEMPERATURE
    openai_timeout: float = openai_chat_adapter.DEFAULT_TIMEOUT_SECONDS

    log_level: str = "INFO"
    public_dir: Path = field(default=DEFAULT_PUBLIC_DIR)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        http_port = _int(env, "PORT", None)
        if http_port is not None and http_port <= 0:
            http_port = None

        ca_files = tuple(
            entry.strip() for entry in (env.get("TLS_CA_FILE") or "").split(",") if entry.strip()
        )
        public_dir = _get(env, "PUBLIC_DIR")

        return cls(
            http_port=http_port,
            https_port=_int(env, "HTTPS_PORT", DEFAULT_HTTPS_PORT),
            host=_get(env, "HOST") or "0.0.0.0",
            okx_instrument=_get(env, "OKX_INSTRUMENT") or okx_adapter.DEFAULT_INSTRUMENT,
            okx_base_url=(_get(env, "OKX_BASE_URL") or okx_adapter.DEFAULT_BASE_URL).rstrip("/"),
            upstream_timeout=_float(env, "UPSTREAM_TIMEOUT_SECONDS", 10.0),
            tls_key_file=_get(env, "TLS_KEY_FILE"),
            tls_cert_file=_get(env, "TLS_CERT_FILE"),
            tls_passphrase=env.get("TLS_PASSPHRASE") or None,
            tls_ca_files=ca_files,
            openai_api_key=_get(env, "OPENAI_API_KEY"),
            openai_base_url=(
                _get(env, "OPENAI_BASE_URL") or openai_chat_adapter.DEFAULT_BASE_URL
            ).rstrip("/"),
            openai_model=_get(env, "OPENAI_MODEL") or openai_chat_adapter.DEFAULT_MODEL,
            openai_temperature=_float(
                env, "OPENAI_TEMPERATURE", openai_chat_adapter.DEFAULT_TEMPERATURE
            ),
            openai_timeout=_float(
                env, "OPENAI_TIMEOUT_SECONDS", openai_chat_adapter.DEFAULT_TIMEOUT_SECONDS
            ),
            log_level=_get(env, "LOG_LEVEL") or "INFO",
            public_dir=Path(public_dir) if public_dir else DEFAULT_PUBLIC_DIR,
        )

    def masked(self) -> dict:
        """All settings as a dict with secrets masked, for startup logging."""
        return {
            "http_port": self.http_port,
            "https_port": self.https_port,
            "host": self.host,
            "okx_instrument": self.okx_instrument,
            "okx_base_url": self.okx_base_url,
            "upstream_timeout": self.upstream_timeout,
            "tls_key_file": self.tls_key_file,
            "tls_cert_file": self.tls_cert_file,
            "tls_passphrase": _mask(self.tls_passphrase),
            "tls_ca_files": list(self.tls_ca_files),
            "openai_api_key": _mask(self.openai_api_key),
            "openai_base_url": self.openai_base_url,
            "openai_model": self.openai_model,
            "openai_temperature": self.openai_temperature,
            "openai_timeout": self.openai_timeout,
            "log_level": self.log_level,
            "public_dir": str(self.public_dir),
        }
