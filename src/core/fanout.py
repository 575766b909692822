"""
Fan-out: "installed" 대상 명령을 설치된 모든 앱에 병렬 실행.

- 고정 크기 worker pool (ThreadPoolExecutor)
- 앱별 결과 수집: 한 앱의 실패가 다른 앱 실행을 멈추지 않음
- 결과는 입력 순서대로 반환
"""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from src.domain.errors import AppError
from src.domain.schemas import FanOutResult

logger = logging.getLogger(__name__)


def _run_one(task: Callable[[str], int], app: str) -> FanOutResult:
    try:
        return FanOutResult(app=app, exit_code=task(app))
    except AppError as e:
        logger.error(f"{app}: {e}")
        return FanOutResult(app=app, exit_code=1, error=str(e))
    except Exception as e:
        logger.exception(f"{app}: unexpected failure")
        return FanOutResult(app=app, exit_code=1, error=f"{type(e).__name__}: {e}")


def fan_out(
    apps: Sequence[str],
    task: Callable[[str], int],
    max_workers: int = 4,
) -> list[FanOutResult]:
    """
    앱 목록에 task를 병렬 실행하고 모두 끝날 때까지 대기.

    Args:
        apps: 대상 앱 목록
        task: 앱 ID → exit code
        max_workers: 최대 동시 실행 수

    Returns:
        앱별 FanOutResult (apps 순서)
    """
    if not apps:
        return []

    workers = max(1, min(max_workers, len(apps)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="app") as pool:
        futures = [pool.submit(_run_one, task, app) for app in apps]
        return [future.result() for future in futures]


def summarize(results: Sequence[FanOutResult]) -> int:
    """
    결과 요약 로그 + 전체 exit code.

    Returns:
        모두 성공이면 0, 하나라도 실패하면 1
    """
    failed = [r for r in results if not r.ok]
    for result in results:
        if result.ok:
            logger.info(f"  {result.app}: ok")
        else:
            logger.warning(
                f"  {result.app}: failed (exit {result.exit_code})"
                + (f" {result.error}" if result.error else "")
            )

    if failed:
        logger.warning(f"{len(failed)}/{len(results)} apps failed")
        return 1
    return 0
