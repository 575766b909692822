"""
Data schemas for the app lifecycle CLI.

규칙:
- 앱별 환경 변수는 하드코딩하지 않고 app.yml manifest로 선언
- 경로는 모두 UMBREL_ROOT 기준으로 계산
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.domain.constants import (
    APP_DATA_DIRNAME,
    APPS_DIRNAME,
    BASE_COMPOSE_FILENAME,
    BITCOIN_DATA_DIRNAME,
    ENV_FILENAME,
    LND_DATA_DIRNAME,
    SEED_FILE,
    SEED_FILE_FALLBACK,
    TOR_DATA_DIR,
    USER_FILE,
)

# =============================================================================
# Platform Layout
# =============================================================================

@dataclass(frozen=True)
class UmbrelPaths:
    """UMBREL_ROOT 기준 플랫폼 경로 모음."""
    umbrel_root: Path
    apps_dir: Path
    app_data_root: Path
    user_file: Path
    seed_file: Path
    seed_file_fallback: Path
    tor_data_dir: Path
    env_file: Path
    base_compose_file: Path
    bitcoin_data_dir: Path
    lnd_data_dir: Path

    @classmethod
    def from_root(cls, umbrel_root: Path) -> "UmbrelPaths":
        """UMBREL_ROOT 하나로 전체 레이아웃 계산."""
        apps_dir = umbrel_root / APPS_DIRNAME
        return cls(
            umbrel_root=umbrel_root,
            apps_dir=apps_dir,
            app_data_root=umbrel_root / APP_DATA_DIRNAME,
            user_file=umbrel_root / USER_FILE,
            seed_file=umbrel_root / SEED_FILE,
            seed_file_fallback=umbrel_root / SEED_FILE_FALLBACK,
            tor_data_dir=umbrel_root / TOR_DATA_DIR,
            env_file=umbrel_root / ENV_FILENAME,
            base_compose_file=apps_dir / BASE_COMPOSE_FILENAME,
            bitcoin_data_dir=umbrel_root / BITCOIN_DATA_DIRNAME,
            lnd_data_dir=umbrel_root / LND_DATA_DIRNAME,
        )

    def app_dir(self, app: str) -> Path:
        """앱 정의(템플릿) 디렉토리."""
        return self.apps_dir / app

    def app_data_dir(self, app: str) -> Path:
        """설치된 앱의 데이터 디렉토리."""
        return self.app_data_root / app


# =============================================================================
# App Manifest (app.yml)
# =============================================================================

@dataclass
class SecretSpec:
    """
    seed에서 파생되는 secret 선언.

    identifier가 없으면 app-<app>-seed-<env> 규칙을 따름.
    """
    env: str
    identifier: str | None = None


@dataclass
class HiddenServiceSpec:
    """tor hidden service 주소 선언 (tor/data/<service>/hostname)."""
    env: str
    service: str


@dataclass
class AppManifest:
    """
    앱별 선언형 manifest.

    필드:
    - secrets: 파생 secret 목록
    - hidden_services: hidden service 주소 목록
    - environment: 고정 값 (IP, 포트 등)
    """
    id: str
    name: str | None = None
    secrets: list[SecretSpec] = field(default_factory=list)
    hidden_services: list[HiddenServiceSpec] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON/YAML 직렬화용."""
        return {
            "id": self.id,
            "name": self.name,
            "secrets": [
                {"env": s.env, "identifier": s.identifier} for s in self.secrets
            ],
            "hidden_services": [
                {"env": h.env, "service": h.service} for h in self.hidden_services
            ],
            "environment": dict(self.environment),
        }


# =============================================================================
# Fan-out
# =============================================================================

@dataclass
class FanOutResult:
    """설치된 앱 하나에 대한 fan-out 실행 결과."""
    app: str
    exit_code: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and self.error is None
