"""
App manifest 로드: apps/<app>/app.yml

앱별 환경 변수(파생 secret, hidden service, 고정 주소)를 선언형으로 기술.
manifest가 없는 앱은 기본 변수(APP_SEED, APP_PASSWORD 등)만 받음.
"""

from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import APP_MANIFEST_FILENAME
from src.domain.errors import AppError, ErrorCodes
from src.domain.schemas import AppManifest, HiddenServiceSpec, SecretSpec


def _reject(manifest_path: Path, reason: str) -> AppError:
    return AppError(
        ErrorCodes.MANIFEST_INVALID,
        path=str(manifest_path),
        reason=reason,
    )


def _parse_secrets(raw: Any, manifest_path: Path) -> list[SecretSpec]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise _reject(manifest_path, "secrets must be a list")

    secrets = []
    for entry in raw:
        if isinstance(entry, str):
            secrets.append(SecretSpec(env=entry))
        elif isinstance(entry, dict) and entry.get("env"):
            secrets.append(
                SecretSpec(env=str(entry["env"]), identifier=entry.get("identifier"))
            )
        else:
            raise _reject(manifest_path, f"invalid secret entry: {entry!r}")
    return secrets


def _parse_hidden_services(
    raw: Any, manifest_path: Path
) -> list[HiddenServiceSpec]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise _reject(manifest_path, "hidden_services must be a list")

    services = []
    for entry in raw:
        if not (isinstance(entry, dict) and entry.get("env") and entry.get("service")):
            raise _reject(manifest_path, f"invalid hidden service entry: {entry!r}")
        services.append(
            HiddenServiceSpec(env=str(entry["env"]), service=str(entry["service"]))
        )
    return services


def _parse_environment(raw: Any, manifest_path: Path) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise _reject(manifest_path, "environment must be a mapping")

    # YAML 숫자(포트 등)도 문자열로 통일
    return {str(k): "" if v is None else str(v) for k, v in raw.items()}


def load_manifest(app_dir: Path) -> AppManifest:
    """
    앱 디렉토리의 app.yml 로드.

    Args:
        app_dir: apps/<app> 경로

    Returns:
        AppManifest (파일 없으면 id만 채운 빈 manifest)

    Raises:
        AppError: MANIFEST_INVALID
    """
    manifest_path = app_dir / APP_MANIFEST_FILENAME
    if not manifest_path.exists():
        return AppManifest(id=app_dir.name)

    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise _reject(manifest_path, str(e)) from e

    if data is None:
        return AppManifest(id=app_dir.name)
    if not isinstance(data, dict):
        raise _reject(manifest_path, "manifest must be a mapping")

    manifest_id = str(data.get("id") or app_dir.name)
    if manifest_id != app_dir.name:
        raise _reject(
            manifest_path,
            f"id {manifest_id!r} does not match directory {app_dir.name!r}",
        )

    return AppManifest(
        id=manifest_id,
        name=data.get("name"),
        secrets=_parse_secrets(data.get("secrets"), manifest_path),
        hidden_services=_parse_hidden_services(
            data.get("hidden_services"), manifest_path
        ),
        environment=_parse_environment(data.get("environment"), manifest_path),
    )
