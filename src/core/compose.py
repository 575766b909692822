"""
Orchestrator(docker-compose) 호출.

서비스 시작/네트워크/헬스체크/재시작은 모두 orchestrator 책임.
이 모듈은 명령을 조립하고 exit code를 그대로 돌려줄 뿐, 해석/재시도하지 않음.
"""

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence

from src.domain.constants import APP_COMPOSE_FILENAME, DEFAULT_COMPOSE_BINARY
from src.domain.errors import AppError, ErrorCodes
from src.domain.schemas import UmbrelPaths

logger = logging.getLogger(__name__)


def check_dependencies(*binaries: str) -> None:
    """
    필수 외부 도구 존재 확인.

    Raises:
        AppError: MISSING_DEPENDENCY
    """
    missing = [binary for binary in binaries if shutil.which(binary) is None]
    if missing:
        raise AppError(
            ErrorCodes.MISSING_DEPENDENCY,
            missing=missing,
            message="This script requires the missing tools to be installed",
        )


class ComposeRunner:
    """앱별 docker-compose 프로젝트 실행기."""

    def __init__(self, paths: UmbrelPaths, binary: str = DEFAULT_COMPOSE_BINARY) -> None:
        self.paths = paths
        self.binary = binary

    def build_command(self, app: str, args: Sequence[str]) -> list[str]:
        """
        docker-compose 명령 조립.

        base compose 파일 → 앱 compose 파일 순으로 병합.
        """
        app_compose_file = self.paths.app_data_dir(app) / APP_COMPOSE_FILENAME
        return [
            self.binary,
            "--env-file", str(self.paths.env_file),
            "--project-name", app,
            "--file", str(self.paths.base_compose_file),
            "--file", str(app_compose_file),
            *args,
        ]

    def run(
        self,
        app: str,
        args: Sequence[str],
        env: Mapping[str, str],
    ) -> int:
        """
        docker-compose 실행.

        Args:
            app: 앱 ID (project name)
            args: compose 서브커맨드 및 인자
            env: 앱 환경 변수 (os.environ 위에 덮어씀)

        Returns:
            orchestrator exit code
        """
        command = self.build_command(app, args)
        logger.debug(f"Running: {' '.join(command)}")

        completed = subprocess.run(command, env={**os.environ, **env}, check=False)
        if completed.returncode != 0:
            logger.warning(
                f"{self.binary} {' '.join(args)} for app {app} "
                f"exited with {completed.returncode}"
            )
        return completed.returncode
