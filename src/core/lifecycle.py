"""
앱 생명주기: install / uninstall / start / stop / compose

규칙:
- 모든 명령은 apps/<app> 디렉토리 존재가 전제 (없으면 INVALID_APP)
- compose 단계가 실패하면 이후 단계는 실행하지 않고 exit code 반환
- 롤백 없음: 중간 실패 시 수동 복구 가능한 상태로 남김
- start는 installed-set에 없는 앱이면 orchestrator 호출 없이 거부
"""

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from src.core.compose import ComposeRunner
from src.core.entropy import read_seed
from src.core.environment import build_app_environment
from src.core.installed_apps import InstalledAppsStore
from src.core.manifest import load_manifest
from src.domain.constants import INSTALL_IGNORE_PATTERNS
from src.domain.errors import AppError, ErrorCodes
from src.domain.schemas import UmbrelPaths

logger = logging.getLogger(__name__)


class AppManager:
    """앱 단위 생명주기 명령 실행기."""

    def __init__(
        self,
        paths: UmbrelPaths,
        config: dict,
        runner: ComposeRunner,
        store: InstalledAppsStore,
        hostname: str | None = None,
    ) -> None:
        self.paths = paths
        self.config = config
        self.runner = runner
        self.store = store
        self.hostname = hostname

    # =========================================================================
    # Helpers
    # =========================================================================

    def validate_app(self, app: str) -> Path:
        """
        앱 정의 디렉토리 확인.

        Raises:
            AppError: INVALID_APP
        """
        app_dir = self.paths.app_dir(app)
        # "../foo" 같은 경로 탈출 방지
        if not app or "/" in app or app in (".", "..") or not app_dir.is_dir():
            raise AppError(
                ErrorCodes.INVALID_APP,
                app=app,
                apps_dir=str(self.paths.apps_dir),
            )
        return app_dir

    def environment(self, app: str) -> dict[str, str]:
        """앱 환경 변수 (매 호출마다 seed에서 다시 파생)."""
        manifest = load_manifest(self.paths.app_dir(app))
        logger.debug(f"Manifest for app {app}: {manifest.to_dict()}")
        return build_app_environment(
            app,
            manifest,
            self.paths,
            read_seed(self.paths),
            self.config,
            hostname=self.hostname,
        )

    def _compose(self, app: str, args: Sequence[str]) -> int:
        return self.runner.run(app, args, self.environment(app))

    def _copy_app_data(self, app: str) -> Path:
        """apps/<app> → app-data/<app> 복사 (기존 파일은 덮어쓰고 .gitkeep 제외)."""
        data_dir = self.paths.app_data_dir(app)
        data_dir.mkdir(parents=True, exist_ok=True)
        shutil.copytree(
            self.paths.app_dir(app),
            data_dir,
            ignore=shutil.ignore_patterns(*INSTALL_IGNORE_PATTERNS),
            dirs_exist_ok=True,
        )
        return data_dir

    def _remove_app_data(self, app: str) -> None:
        """
        app-data/<app> 삭제. 이미 없으면 무시.

        Raises:
            AppError: DATA_DIR_REMOVE_FAILED (installed-set 은 건드리지 않음)
        """
        data_dir = self.paths.app_data_dir(app)
        try:
            shutil.rmtree(data_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise AppError(
                ErrorCodes.DATA_DIR_REMOVE_FAILED,
                app=app,
                data_dir=str(data_dir),
                error=str(e),
            ) from e

    # =========================================================================
    # Commands
    # =========================================================================

    def install(self, app: str) -> int:
        self.validate_app(app)

        logger.info(f"Setting up data dir for app {app}...")
        self._copy_app_data(app)

        logger.info(f"Pulling images for app {app}...")
        code = self._compose(app, ["pull"])
        if code != 0:
            return code

        logger.info(f"Starting app {app}...")
        code = self._compose(app, ["up", "--detach"])
        if code != 0:
            return code

        logger.info("Saving installed app in DB")
        self.store.add(app)
        logger.info(f"Successfully installed app {app}")
        return 0

    def uninstall(self, app: str) -> int:
        self.validate_app(app)

        logger.info(f"Removing images for app {app}...")
        code = self._compose(app, ["rm", "--force", "--stop"])
        if code != 0:
            return code

        logger.info(f"Deleting data dir for app {app}...")
        self._remove_app_data(app)

        logger.info("Removing installed app from DB...")
        self.store.remove(app)
        logger.info(f"Successfully uninstalled app {app}")
        return 0

    def start(self, app: str) -> int:
        self.validate_app(app)

        if not self.store.contains(app):
            raise AppError(ErrorCodes.APP_NOT_INSTALLED, app=app)

        logger.info(f"Starting app {app}...")
        return self._compose(app, ["up", "--detach"])

    def stop(self, app: str) -> int:
        self.validate_app(app)

        logger.info(f"Stopping app {app}...")
        return self._compose(app, ["rm", "--force", "--stop"])

    def compose(self, app: str, args: Sequence[str]) -> int:
        self.validate_app(app)
        return self._compose(app, args)

    def list_installed(self) -> list[str]:
        return self.store.list()

    def run_command(self, command: str, app: str, args: Sequence[str] = ()) -> int:
        """명령 이름으로 dispatch (fan-out에서 사용)."""
        if command == "install":
            return self.install(app)
        if command == "uninstall":
            return self.uninstall(app)
        if command == "start":
            return self.start(app)
        if command == "stop":
            return self.stop(app)
        if command == "compose":
            return self.compose(app, args)
        raise AppError(ErrorCodes.UNKNOWN_COMMAND, command=command)
