"""
test_lifecycle.py - install / uninstall / start / stop / compose 테스트

DoD:
- install 두 번 → installed-set에 한 번만
- uninstall → installed-set에서 제거 + data dir 삭제
- 설치 안 된 앱 start → APP_NOT_INSTALLED, orchestrator 호출 없음
- 존재하지 않는 앱 → INVALID_APP
- app-data 삭제 실패 → DATA_DIR_REMOVE_FAILED, installed-set 유지
"""

import logging
import shutil
from pathlib import Path

import pytest

from src.core.compose import ComposeRunner
from src.core.entropy import derive_entropy
from src.core.installed_apps import InstalledAppsStore
from src.core.lifecycle import AppManager
from src.domain.errors import AppError, ErrorCodes
from src.domain.schemas import UmbrelPaths


class TestValidateApp:
    def test_existing_app(self, manager: AppManager, paths: UmbrelPaths):
        assert manager.validate_app("test-app") == paths.apps_dir / "test-app"

    @pytest.mark.parametrize("app", ["missing-app", "", "..", "../umbrel"])
    def test_invalid_app(self, manager: AppManager, app: str):
        with pytest.raises(AppError) as exc_info:
            manager.validate_app(app)

        assert exc_info.value.code == ErrorCodes.INVALID_APP

    def test_every_command_validates(self, manager: AppManager, runner: ComposeRunner):
        for command in ("install", "uninstall", "start", "stop", "compose"):
            with pytest.raises(AppError):
                manager.run_command(command, "missing-app", ["ps"])

        assert runner.calls == []


class TestInstall:
    """install 명령 테스트."""

    def test_install_sequence(
        self, manager: AppManager, runner: ComposeRunner, store: InstalledAppsStore
    ):
        assert manager.install("test-app") == 0

        assert runner.commands_for("test-app") == [["pull"], ["up", "--detach"]]
        assert store.list() == ["test-app"]

    def test_copies_app_data_without_gitkeep(
        self, manager: AppManager, paths: UmbrelPaths
    ):
        manager.install("test-app")

        data_dir = paths.app_data_root / "test-app"
        assert (data_dir / "docker-compose.yml").exists()
        assert (data_dir / "data" / "wallet").is_dir()
        assert not (data_dir / "data" / "wallet" / ".gitkeep").exists()

    def test_install_twice_listed_once(
        self, manager: AppManager, store: InstalledAppsStore
    ):
        manager.install("test-app")
        manager.install("test-app")

        assert manager.list_installed().count("test-app") == 1

    def test_reinstall_keeps_existing_data(
        self, manager: AppManager, paths: UmbrelPaths
    ):
        manager.install("test-app")
        wallet = paths.app_data_root / "test-app" / "data" / "wallet" / "wallet.db"
        wallet.write_text("funds")

        manager.install("test-app")

        assert wallet.read_text() == "funds"

    def test_passes_derived_environment(self, manager: AppManager, runner: ComposeRunner):
        manager.install("test-app")

        _, _, env = runner.calls[0]
        assert env["APP_SEED"] == derive_entropy("app-test-app-seed", "test-umbrel-seed")
        assert env["APP_DOMAIN"] == "umbrel-box.local"

    def test_logs_manifest_at_debug(
        self, manager: AppManager, caplog: pytest.LogCaptureFixture
    ):
        caplog.set_level(logging.DEBUG, logger="src.core.lifecycle")

        manager.install("test-app")

        assert "Manifest for app test-app" in caplog.text
        assert "'id': 'test-app'" in caplog.text

    def test_pull_failure_stops_install(
        self,
        paths: UmbrelPaths,
        test_config: dict,
        store: InstalledAppsStore,
        fake_runner_cls: type[ComposeRunner],
    ):
        """pull 실패 시 up/DB 기록 없이 exit code 반환 (롤백 없음)."""
        runner = fake_runner_cls(paths, exit_codes={"pull": 1})
        manager = AppManager(paths, test_config, runner, store, hostname="box")

        assert manager.install("test-app") == 1

        assert runner.commands_for("test-app") == [["pull"]]
        assert store.list() == []
        assert (paths.app_data_root / "test-app").is_dir()


class TestUninstall:
    """uninstall 명령 테스트."""

    def test_uninstall_removes_app(
        self,
        manager: AppManager,
        runner: ComposeRunner,
        store: InstalledAppsStore,
        paths: UmbrelPaths,
    ):
        manager.install("test-app")
        manager.install("other-app")

        assert manager.uninstall("test-app") == 0

        assert runner.commands_for("test-app")[-1] == ["rm", "--force", "--stop"]
        assert store.list() == ["other-app"]
        assert not (paths.app_data_root / "test-app").exists()
        assert (paths.app_data_root / "other-app").exists()

    def test_uninstall_not_installed_is_noop_for_state(
        self, manager: AppManager, store: InstalledAppsStore
    ):
        assert manager.uninstall("test-app") == 0
        assert store.list() == []

    def test_remove_failure_keeps_app_installed(
        self,
        manager: AppManager,
        store: InstalledAppsStore,
        paths: UmbrelPaths,
        tmp_path: Path,
    ):
        """data dir 삭제 실패 시 DB에서 지우지 않고 에러로 중단."""
        manager.install("test-app")
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_text("keep")

        # rmtree는 심볼릭 링크 삭제를 거부함
        data_dir = paths.app_data_root / "test-app"
        shutil.rmtree(data_dir)
        data_dir.symlink_to(outside, target_is_directory=True)

        with pytest.raises(AppError) as exc_info:
            manager.uninstall("test-app")

        assert exc_info.value.code == ErrorCodes.DATA_DIR_REMOVE_FAILED
        assert exc_info.value.context["app"] == "test-app"
        assert store.list() == ["test-app"]
        assert (outside / "keep.txt").read_text() == "keep"


class TestStartStop:
    """start / stop 명령 테스트."""

    def test_start_requires_installed(self, manager: AppManager, runner: ComposeRunner):
        with pytest.raises(AppError) as exc_info:
            manager.start("test-app")

        assert exc_info.value.code == ErrorCodes.APP_NOT_INSTALLED
        assert runner.calls == []

    def test_start_installed(self, manager: AppManager, runner: ComposeRunner):
        manager.install("test-app")
        runner.calls.clear()

        assert manager.start("test-app") == 0
        assert runner.commands_for("test-app") == [["up", "--detach"]]

    def test_stop(self, manager: AppManager, runner: ComposeRunner):
        assert manager.stop("test-app") == 0
        assert runner.commands_for("test-app") == [["rm", "--force", "--stop"]]


class TestCompose:
    def test_passthrough(self, manager: AppManager, runner: ComposeRunner):
        assert manager.compose("test-app", ["logs", "--tail", "10"]) == 0
        assert runner.commands_for("test-app") == [["logs", "--tail", "10"]]

    def test_exit_code_propagated(
        self,
        paths: UmbrelPaths,
        test_config: dict,
        store: InstalledAppsStore,
        fake_runner_cls: type[ComposeRunner],
    ):
        runner = fake_runner_cls(paths, exit_codes={"ps": 17})
        manager = AppManager(paths, test_config, runner, store, hostname="box")

        assert manager.compose("test-app", ["ps"]) == 17

    def test_unknown_command(self, manager: AppManager):
        with pytest.raises(AppError) as exc_info:
            manager.run_command("restart", "test-app")

        assert exc_info.value.code == ErrorCodes.UNKNOWN_COMMAND
