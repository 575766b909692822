"""
Installed-set 관리: db/user.json 의 installedApps

규칙:
- user.json = 설치된 앱 목록의 유일한 진실 원천
- 읽기-수정-쓰기를 하나의 락 구간에서 수행 (FileLock, timeout 있음)
- 원자적 쓰기: temp → fsync → replace
- 집합 의미론: 중복 추가는 무시, 없는 앱 제거도 무시
- installedApps 외의 키는 보존
"""

import json
import logging
import os
import tempfile
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.domain.constants import DEFAULT_LOCK_TIMEOUT, INSTALLED_APPS_KEY, LOCK_SUFFIX
from src.domain.errors import AppError, ErrorCodes

logger = logging.getLogger(__name__)

# =============================================================================
# Atomic Write
# =============================================================================


def atomic_write_json(path: Path, data: dict) -> None:
    """
    user.json 원자적 쓰기: 같은 디렉토리의 temp 파일에 쓰고 fsync 후 교체.

    교체 전에 실패하면 temp 파일만 지우고 기존 파일은 그대로 둠.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f"{path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


# =============================================================================
# Store
# =============================================================================


class InstalledAppsStore:
    """
    user.json 의 installedApps 집합.

    사용법:
        store = InstalledAppsStore(paths.user_file)
        store.add("suredbits-wallet")
        store.list()
    """

    def __init__(
        self,
        user_file: Path,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ) -> None:
        self.user_file = user_file
        self.lock_file = user_file.with_name(user_file.name + LOCK_SUFFIX)
        self.lock_timeout = lock_timeout

    @contextmanager
    def _lock(self) -> Generator[None, None, None]:
        """
        user.json 락 획득.

        정상 종료/예외 모두 해제. timeout 초과 시 에러.

        Raises:
            AppError: STATE_LOCK_TIMEOUT
        """
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_file, timeout=self.lock_timeout)

        try:
            lock.acquire()
        except Timeout as e:
            raise AppError(
                ErrorCodes.STATE_LOCK_TIMEOUT,
                lock_file=str(self.lock_file),
                timeout=self.lock_timeout,
            ) from e

        try:
            yield
        finally:
            lock.release()

    def _load(self) -> dict[str, Any]:
        """
        user.json 로드 (락 없이).

        Raises:
            AppError: STATE_CORRUPT
        """
        if not self.user_file.exists():
            return {}

        try:
            data = json.loads(self.user_file.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise AppError(
                ErrorCodes.STATE_CORRUPT,
                path=str(self.user_file),
                error=str(e),
            ) from e

        if not isinstance(data, dict):
            raise AppError(
                ErrorCodes.STATE_CORRUPT,
                path=str(self.user_file),
                error="top-level value is not an object",
            )
        return data

    @staticmethod
    def _installed(data: dict[str, Any]) -> set[str]:
        apps = data.get(INSTALLED_APPS_KEY) or []
        return {str(app) for app in apps}

    def _update(self, mutate: Callable[[set[str]], set[str]]) -> list[str]:
        """읽기-수정-쓰기 트랜잭션."""
        with self._lock():
            data = self._load()
            updated = sorted(mutate(self._installed(data)))
            data[INSTALLED_APPS_KEY] = updated
            atomic_write_json(self.user_file, data)
            logger.debug(f"{INSTALLED_APPS_KEY} updated: {updated}")
            return updated

    def add(self, app: str) -> list[str]:
        """앱 추가 (이미 있으면 변화 없음)."""
        return self._update(lambda apps: apps | {app})

    def remove(self, app: str) -> list[str]:
        """앱 제거 (없으면 변화 없음)."""
        return self._update(lambda apps: apps - {app})

    def contains(self, app: str) -> bool:
        return app in self.list()

    # list 는 builtin 이름을 가리므로 마지막에 정의
    def list(self) -> list[str]:
        """설치된 앱 목록 (정렬됨)."""
        with self._lock():
            return sorted(self._installed(self._load()))

