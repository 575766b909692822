"""
설정 로드: default.yaml + 환경 변수.

우선순위:
1. UMBREL_ROOT 환경 변수 (.env 포함, CLI에서 load_dotenv)
2. default.yaml의 paths.umbrel_root
3. 프로젝트 루트 (apps/ 포함)
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import (
    DEFAULT_COMPOSE_BINARY,
    DEFAULT_FALLBACK_HOSTNAME,
    DEFAULT_FANOUT_WORKERS,
    DEFAULT_HIDDEN_SERVICE_PLACEHOLDER,
    DEFAULT_LOCK_TIMEOUT,
)
from src.domain.schemas import UmbrelPaths

PROJECT_ROOT = Path(__file__).parent.parent.parent


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] | None = yaml.safe_load(f)
        return data or {}


def resolve_paths(
    config: dict,
    environ: Mapping[str, str] | None = None,
) -> UmbrelPaths:
    """
    플랫폼 경로 계산.

    Args:
        config: 설정 (paths.umbrel_root)
        environ: 환경 변수 (기본: os.environ)

    Returns:
        UmbrelPaths
    """
    if environ is None:
        environ = os.environ

    root = environ.get("UMBREL_ROOT") or config.get("paths", {}).get("umbrel_root")
    umbrel_root = Path(root) if root else PROJECT_ROOT
    return UmbrelPaths.from_root(umbrel_root.resolve())


# =============================================================================
# Tunables
# =============================================================================


def get_compose_binary(config: dict) -> str:
    return config.get("compose", {}).get("binary", DEFAULT_COMPOSE_BINARY)


def get_lock_timeout(config: dict) -> float:
    return float(config.get("state", {}).get("lock_timeout", DEFAULT_LOCK_TIMEOUT))


def get_fanout_workers(config: dict) -> int:
    return int(config.get("fanout", {}).get("max_workers", DEFAULT_FANOUT_WORKERS))


def get_hidden_service_placeholder(config: dict) -> str:
    return config.get("hidden_service", {}).get(
        "placeholder", DEFAULT_HIDDEN_SERVICE_PLACEHOLDER
    )


def get_fallback_hostname(config: dict) -> str:
    return config.get("domain", {}).get(
        "fallback_hostname", DEFAULT_FALLBACK_HOSTNAME
    )
