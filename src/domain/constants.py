"""
Domain Constants: 앱 관리 전역 상수.

파일명 정책, 경로 상수, 환경 변수 이름 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Umbrel Root Layout (플랫폼 디렉토리 구조)
# =============================================================================
# $UMBREL_ROOT/
# ├── apps/
# │   ├── docker-compose.common.yml
# │   └── <app>/ (docker-compose.yml, app.yml, data/)
# ├── app-data/<app>/
# ├── db/user.json
# ├── db/umbrel-seed/seed
# ├── tor/data/app-<app>/hostname
# └── .env

APPS_DIRNAME = "apps"
APP_DATA_DIRNAME = "app-data"
USER_FILE = "db/user.json"
SEED_FILE = "db/umbrel-seed/seed"
# in-place 업그레이드 중에는 seed가 root 바깥에 잠시 위치함
SEED_FILE_FALLBACK = "../.umbrel-seed"
TOR_DATA_DIR = "tor/data"
ENV_FILENAME = ".env"
BITCOIN_DATA_DIRNAME = "bitcoin"
LND_DATA_DIRNAME = "lnd"

# =============================================================================
# App Directory Structure (앱 디렉토리 구조)
# =============================================================================

BASE_COMPOSE_FILENAME = "docker-compose.common.yml"
APP_COMPOSE_FILENAME = "docker-compose.yml"
APP_MANIFEST_FILENAME = "app.yml"
HIDDEN_SERVICE_HOSTNAME_FILENAME = "hostname"

# 설치 시 복사하지 않는 파일
INSTALL_IGNORE_PATTERNS = (".gitkeep",)

# =============================================================================
# Installed-set (user.json)
# =============================================================================

INSTALLED_APPS_KEY = "installedApps"
LOCK_SUFFIX = ".lock"

# =============================================================================
# CLI
# =============================================================================

# 모든 설치된 앱으로 명령을 fan-out 하는 가상 앱 이름
INSTALLED_TARGET = "installed"

APP_COMMANDS = ("install", "uninstall", "start", "stop", "compose")
LIST_COMMAND = "ls-installed"

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_COMPOSE_BINARY = "docker-compose"
DEFAULT_LOCK_TIMEOUT = 30.0
DEFAULT_FANOUT_WORKERS = 4
DEFAULT_HIDDEN_SERVICE_PLACEHOLDER = "notyetset.onion"
DEFAULT_FALLBACK_HOSTNAME = "umbrel"

# =============================================================================
# Secret Identifiers
# =============================================================================

APP_SEED_IDENTIFIER = "app-{app}-seed"
APP_SECRET_IDENTIFIER = "app-{app}-seed-{name}"


def app_seed_identifier(app: str) -> str:
    """APP_SEED 파생용 identifier."""
    return APP_SEED_IDENTIFIER.format(app=app)


def app_secret_identifier(app: str, name: str) -> str:
    """
    앱별 secret 파생용 identifier.

    Args:
        app: 앱 ID
        name: secret 이름 (보통 환경 변수 이름, 예: APP_PASSWORD)

    Returns:
        identifier 문자열 (예: app-foo-seed-APP_PASSWORD)
    """
    return APP_SECRET_IDENTIFIER.format(app=app, name=name)
