"""
Orchestrator 환경 변수 조립.

고정 변수:
- APP_DATA_DIR, BITCOIN_DATA_DIR, LND_DATA_DIR
- APP_DOMAIN: <short hostname>.local
- APP_HIDDEN_SERVICE: tor/data/app-<app>/hostname (없으면 placeholder)
- APP_SEED, APP_PASSWORD: seed 파생

manifest 변수:
- environment (고정 값) → secrets (파생) → hidden_services 순으로 덮어씀
"""

import logging
import socket
from pathlib import Path

from src.core.config import get_fallback_hostname, get_hidden_service_placeholder
from src.core.entropy import derive_entropy
from src.domain.constants import (
    HIDDEN_SERVICE_HOSTNAME_FILENAME,
    app_secret_identifier,
    app_seed_identifier,
)
from src.domain.schemas import AppManifest, UmbrelPaths

logger = logging.getLogger(__name__)


def get_app_domain(hostname: str | None, fallback: str) -> str:
    """
    mDNS 도메인 계산 (hostname -s 와 동일하게 첫 label만 사용).

    Args:
        hostname: 호스트명 (None이면 socket.gethostname())
        fallback: 호스트명을 구할 수 없을 때 사용할 값

    Returns:
        "<short>.local"
    """
    if hostname is None:
        try:
            hostname = socket.gethostname()
        except OSError:
            hostname = ""

    short = hostname.split(".")[0].strip()
    return f"{short or fallback}.local"


def read_hidden_service(tor_data_dir: Path, service: str, placeholder: str) -> str:
    """
    hidden service 주소 읽기.

    Args:
        tor_data_dir: tor/data 경로
        service: 서비스 디렉토리 이름 (예: app-foo)
        placeholder: 아직 프로비저닝 전일 때 반환할 값

    Returns:
        onion 주소 또는 placeholder
    """
    hostname_file = tor_data_dir / service / HIDDEN_SERVICE_HOSTNAME_FILENAME
    try:
        value = hostname_file.read_text(encoding="utf-8").strip()
    except OSError:
        logger.debug(f"Hidden service not provisioned yet: {hostname_file}")
        return placeholder
    return value or placeholder


def build_app_environment(
    app: str,
    manifest: AppManifest,
    paths: UmbrelPaths,
    seed: str,
    config: dict,
    hostname: str | None = None,
) -> dict[str, str]:
    """
    앱 하나에 대한 orchestrator 환경 변수 생성.

    Args:
        app: 앱 ID
        manifest: 앱 manifest
        paths: 플랫폼 경로
        seed: Umbrel seed
        config: 설정 (hidden_service.placeholder, domain.fallback_hostname)
        hostname: 테스트용 호스트명 주입

    Returns:
        환경 변수 dict

    Raises:
        AppError: MISSING_DERIVATION_PARAMETER
    """
    placeholder = get_hidden_service_placeholder(config)

    env = {
        "APP_DATA_DIR": str(paths.app_data_dir(app)),
        "BITCOIN_DATA_DIR": str(paths.bitcoin_data_dir),
        "LND_DATA_DIR": str(paths.lnd_data_dir),
        "APP_DOMAIN": get_app_domain(hostname, get_fallback_hostname(config)),
        "APP_HIDDEN_SERVICE": read_hidden_service(
            paths.tor_data_dir, f"app-{app}", placeholder
        ),
        "APP_SEED": derive_entropy(app_seed_identifier(app), seed),
        "APP_PASSWORD": derive_entropy(app_secret_identifier(app, "APP_PASSWORD"), seed),
    }

    env.update(manifest.environment)

    for secret in manifest.secrets:
        identifier = secret.identifier or app_secret_identifier(app, secret.env)
        env[secret.env] = derive_entropy(identifier, seed)

    for service in manifest.hidden_services:
        env[service.env] = read_hidden_service(
            paths.tor_data_dir, service.service, placeholder
        )

    return env
