"""
Pytest fixtures for the app CLI tests.

구성:
- tmp_path 기반 UMBREL_ROOT (apps/, db/, tor/)
- docker-compose 대신 호출만 기록하는 FakeRunner
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from src.core.compose import ComposeRunner
from src.core.installed_apps import InstalledAppsStore
from src.core.lifecycle import AppManager
from src.domain.schemas import UmbrelPaths

TEST_SEED = "test-umbrel-seed"

# =============================================================================
# Fake Orchestrator
# =============================================================================


class FakeRunner(ComposeRunner):
    """docker-compose를 실행하지 않고 호출만 기록."""

    def __init__(self, paths: UmbrelPaths, exit_codes: Mapping[str, int] | None = None):
        super().__init__(paths, binary="docker-compose")
        self.calls: list[tuple[str, list[str], dict[str, str]]] = []
        # 서브커맨드(args[0]) → exit code
        self.exit_codes = dict(exit_codes or {})

    def run(self, app: str, args: Sequence[str], env: Mapping[str, str]) -> int:
        self.calls.append((app, list(args), dict(env)))
        return self.exit_codes.get(args[0] if args else "", 0)

    def commands_for(self, app: str) -> list[list[str]]:
        return [args for called_app, args, _ in self.calls if called_app == app]


# =============================================================================
# Path Fixtures
# =============================================================================


def make_app(apps_dir: Path, app: str, manifest: str | None = None) -> Path:
    """테스트용 앱 정의 디렉토리 생성."""
    app_dir = apps_dir / app
    (app_dir / "data" / "wallet").mkdir(parents=True)
    (app_dir / "data" / "wallet" / ".gitkeep").write_text("")
    (app_dir / "docker-compose.yml").write_text("version: '3.7'\nservices: {}\n")
    if manifest is not None:
        (app_dir / "app.yml").write_text(manifest, encoding="utf-8")
    return app_dir


@pytest.fixture
def umbrel_root(tmp_path: Path) -> Path:
    """
    테스트용 UMBREL_ROOT.

    포함:
    - apps/docker-compose.common.yml
    - apps/test-app, apps/other-app
    - db/umbrel-seed/seed
    """
    root = tmp_path / "umbrel"
    apps_dir = root / "apps"
    apps_dir.mkdir(parents=True)
    (apps_dir / "docker-compose.common.yml").write_text("version: '3.7'\n")

    make_app(apps_dir, "test-app")
    make_app(apps_dir, "other-app")

    seed_file = root / "db" / "umbrel-seed" / "seed"
    seed_file.parent.mkdir(parents=True)
    seed_file.write_text(TEST_SEED + "\n")

    return root


@pytest.fixture
def paths(umbrel_root: Path) -> UmbrelPaths:
    return UmbrelPaths.from_root(umbrel_root)


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정."""
    return {
        "compose": {"binary": "docker-compose"},
        "state": {"lock_timeout": 2},
        "fanout": {"max_workers": 2},
        "hidden_service": {"placeholder": "notyetset.onion"},
        "domain": {"fallback_hostname": "umbrel"},
    }


# =============================================================================
# Manager Fixtures
# =============================================================================


@pytest.fixture
def store(paths: UmbrelPaths) -> InstalledAppsStore:
    return InstalledAppsStore(paths.user_file, lock_timeout=2)


@pytest.fixture
def fake_runner_cls() -> type[FakeRunner]:
    """exit code를 지정한 FakeRunner를 직접 만들 때 사용."""
    return FakeRunner


@pytest.fixture
def runner(paths: UmbrelPaths) -> FakeRunner:
    return FakeRunner(paths)


@pytest.fixture
def manager(
    paths: UmbrelPaths,
    test_config: dict,
    runner: FakeRunner,
    store: InstalledAppsStore,
) -> AppManager:
    return AppManager(paths, test_config, runner, store, hostname="umbrel-box")
