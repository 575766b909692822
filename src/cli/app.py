#!/usr/bin/env python3
"""
app - Umbrel 앱 설치/시작/중지/제거 CLI

사용법:
    app install   <app-name>
    app uninstall <app-name>
    app start     <app-name>
    app stop      <app-name>
    app compose   <app-name> [docker-compose args...]
    app ls-installed

    # 설치된 모든 앱에 대해 실행
    app start installed

환경 변수:
    UMBREL_ROOT  플랫폼 루트 (기본: default.yaml 의 paths.umbrel_root 또는 프로젝트 루트)
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv

from src.core.compose import ComposeRunner, check_dependencies
from src.core.config import (
    get_compose_binary,
    get_fanout_workers,
    get_lock_timeout,
    load_config,
    resolve_paths,
)
from src.core.fanout import fan_out, summarize
from src.core.installed_apps import InstalledAppsStore
from src.core.lifecycle import AppManager
from src.domain.constants import APP_COMMANDS, INSTALLED_TARGET, LIST_COMMAND
from src.domain.errors import AppError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="app",
        description="Umbrel 앱 관리 CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="설정 파일 경로 (기본: default.yaml)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="DEBUG 로그 출력",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help=f"{', '.join(APP_COMMANDS)}, {LIST_COMMAND}",
    )
    parser.add_argument(
        "app",
        nargs="?",
        help=f"앱 이름 ('{INSTALLED_TARGET}' = 설치된 모든 앱)",
    )
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="compose 명령에 그대로 전달할 인자",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    load_dotenv()

    config = load_config(Path(args.config) if args.config else None)
    paths = resolve_paths(config)
    store = InstalledAppsStore(paths.user_file, lock_timeout=get_lock_timeout(config))

    try:
        if args.command == LIST_COMMAND:
            for app in store.list():
                print(app)
            return 0

        if args.command not in APP_COMMANDS or not args.app:
            parser.print_help()
            return 1

        binary = get_compose_binary(config)
        check_dependencies(binary)

        manager = AppManager(paths, config, ComposeRunner(paths, binary), store)

        if args.app == INSTALLED_TARGET:
            installed = store.list()
            logger.info(f"Running '{args.command}' for {len(installed)} installed apps")
            results = fan_out(
                installed,
                lambda app: manager.run_command(args.command, app, args.args),
                max_workers=get_fanout_workers(config),
            )
            return summarize(results)

        return manager.run_command(args.command, args.app, args.args)

    except AppError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
