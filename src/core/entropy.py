"""
Secret 파생: derive_entropy

규칙:
- 결정론적: 동일 seed + identifier → 동일 값 (랜덤 생성/저장 없음)
- HMAC-SHA256, hex digest (openssl dgst -sha256 -hmac 과 동일한 출력)
- seed 또는 identifier가 비어 있으면 즉시 중단 (예측 가능한 값 생성 금지)
"""

import hashlib
import hmac
import logging

from src.domain.errors import AppError, ErrorCodes
from src.domain.schemas import UmbrelPaths

logger = logging.getLogger(__name__)


def read_seed(paths: UmbrelPaths) -> str:
    """
    Umbrel seed 읽기.

    - seed 파일이 없으면 in-place 업그레이드 경로(seed_file_fallback) 확인
    - 둘 다 없으면 빈 문자열 (derive_entropy에서 reject)

    Args:
        paths: 플랫폼 경로

    Returns:
        seed 문자열 (끝의 개행만 제거)
    """
    for seed_path in (paths.seed_file, paths.seed_file_fallback):
        if seed_path.is_file():
            if seed_path != paths.seed_file:
                logger.debug(f"Using fallback seed file: {seed_path}")
            return seed_path.read_text(encoding="utf-8").rstrip("\n")
    return ""


def derive_entropy(identifier: str, seed: str) -> str:
    """
    seed를 키로 identifier의 HMAC-SHA256 계산.

    Args:
        identifier: 용도별 고정 문자열 (예: app-foo-seed-APP_PASSWORD)
        seed: Umbrel seed

    Returns:
        소문자 hex digest (64자)

    Raises:
        AppError: MISSING_DERIVATION_PARAMETER
    """
    if not seed or not identifier:
        raise AppError(
            ErrorCodes.MISSING_DERIVATION_PARAMETER,
            message="Missing derivation parameter, this is unsafe, exiting.",
            has_seed=bool(seed),
            has_identifier=bool(identifier),
        )

    digest = hmac.new(
        seed.encode("utf-8"),
        identifier.encode("utf-8"),
        hashlib.sha256,
    )
    return digest.hexdigest()
