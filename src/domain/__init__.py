"""
Domain layer: 에러, 상수, 스키마.
"""

from .errors import AppError, ErrorCodes
from .schemas import (
    AppManifest,
    FanOutResult,
    HiddenServiceSpec,
    SecretSpec,
    UmbrelPaths,
)

__all__ = [
    "AppError",
    "ErrorCodes",
    "AppManifest",
    "FanOutResult",
    "HiddenServiceSpec",
    "SecretSpec",
    "UmbrelPaths",
]
