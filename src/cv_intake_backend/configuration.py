from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

logger = logging.getLogger(__name__)

_HERE = Path(__file__).resolve()
_CANDIDATE_CONFIG_PATHS = [parent / "config/config.yaml" for parent in _HERE.parents[:3]]

CONFIG_PATH = next((path for path in _CANDIDATE_CONFIG_PATHS if path.exists()), None)
if CONFIG_PATH is None:  # pragma: no cover - fail fast in misconfigured environments
    raise FileNotFoundError("Default config.yaml could not be located; ensure the package was installed with its data files.")


@dataclass(frozen=True)
class UploadPolicy:
    max_file_size: int
    allowed_extensions: Tuple[str, ...]


@dataclass(frozen=True)
class ScratchConfig:
    prefix: str
    timestamp_format: str


@dataclass(frozen=True)
class ScannerConfig:
    command: str
    clean_marker: str
    timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class ConverterConfig:
    command: str
    timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class StorageConfig:
    endpoint: str
    region: str
    access_key: str
    secret_key: str
    bucket: str
    acl: str = "public-read"


@dataclass(frozen=True)
class ServiceConfig:
    """
    Process-wide settings, built once at startup and read-only afterwards.

    Holds the upload policy, the external tool settings, the object storage
    credentials and the token signing secret.
    """

    policy: UploadPolicy
    scratch: ScratchConfig
    scanner: ScannerConfig
    converter: ConverterConfig
    storage: StorageConfig
    token_secret: str
    log_level: str = "INFO"


def _load_default_config() -> DictConfig:
    if not CONFIG_PATH.exists():
        raise FileNotFoundError(f"Default config not found at {CONFIG_PATH}")
    return OmegaConf.load(CONFIG_PATH)


def make_runtime_config(overrides: Dict[str, Any] | None = None) -> DictConfig:
    base = _load_default_config()
    OmegaConf.set_struct(base, True)

    cli_config = OmegaConf.create(overrides or {})
    merged = DictConfig(OmegaConf.merge(base, cli_config))
    return merged


def build_service_config(config: DictConfig) -> ServiceConfig:
    resolved: Dict[str, Any] = OmegaConf.to_container(config, resolve=True)  # type: ignore[assignment]
    policy = resolved["policy"]

    service_config = ServiceConfig(
        policy=UploadPolicy(
            max_file_size=int(policy["max_file_size"]),
            allowed_extensions=tuple(ext.lower() for ext in policy["allowed_extensions"]),
        ),
        scratch=ScratchConfig(**resolved["scratch"]),
        scanner=ScannerConfig(**resolved["scanner"]),
        converter=ConverterConfig(**resolved["converter"]),
        storage=StorageConfig(**resolved["storage"]),
        token_secret=resolved["token"]["secret"],
        log_level=resolved["logging"]["level"],
    )

    if not service_config.token_secret:
        logger.warning("DO_SECRET_KEY_DO_FUNCTIONS not configured, tokens will be signed with an empty key")
    if not service_config.storage.bucket:
        logger.warning("DO_SPACES_BUCKET_NAME not configured, uploads will fail")
    return service_config


@lru_cache(maxsize=1)
def load_service_config() -> ServiceConfig:
    """Read .env, resolve the default config against the environment and freeze it."""
    load_dotenv()
    return build_service_config(make_runtime_config())


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
