"""
Core layer: 운영 안전 핵심 모듈.

역할:
- installed-set (user.json), 락, secret 파생, 환경 변수 조립, compose 호출
"""

from .compose import ComposeRunner, check_dependencies
from .entropy import derive_entropy, read_seed
from .environment import build_app_environment, read_hidden_service
from .fanout import fan_out, summarize
from .installed_apps import InstalledAppsStore, atomic_write_json
from .lifecycle import AppManager
from .manifest import load_manifest

__all__ = [
    # installed_apps
    "InstalledAppsStore",
    "atomic_write_json",
    # entropy
    "derive_entropy",
    "read_seed",
    # manifest / environment
    "load_manifest",
    "build_app_environment",
    "read_hidden_service",
    # compose
    "ComposeRunner",
    "check_dependencies",
    # lifecycle
    "AppManager",
    "fan_out",
    "summarize",
]
