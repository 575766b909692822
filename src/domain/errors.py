"""
Error definitions for the app lifecycle CLI.

규칙:
- 조용한 실패 금지 → AppError로 명시적 실패
- 예측 가능한 secret 생성 금지 → seed/identifier 누락 시 즉시 중단
- orchestrator 실패는 해석하지 않음 → exit code 그대로 전달
"""

from typing import Any


class AppError(Exception):
    """
    앱 관리 중 즉시 중단이 필요한 경우 발생하는 에러.

    사용 예:
    - 필수 외부 도구 누락
    - 존재하지 않는 앱
    - 설치되지 않은 앱 start
    - seed/identifier 누락
    - user.json 손상, 락 timeout

    Usage:
        raise AppError("INVALID_APP", app="foo", apps_dir="/umbrel/apps")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 모두 CLI에서 exit 1로 매핑됨."""

    # === Environment ===
    MISSING_DEPENDENCY = "MISSING_DEPENDENCY"

    # === App ===
    INVALID_APP = "INVALID_APP"
    APP_NOT_INSTALLED = "APP_NOT_INSTALLED"
    DATA_DIR_REMOVE_FAILED = "DATA_DIR_REMOVE_FAILED"
    MANIFEST_INVALID = "MANIFEST_INVALID"

    # === Secrets ===
    MISSING_DERIVATION_PARAMETER = "MISSING_DERIVATION_PARAMETER"

    # === Installed-set (user.json) ===
    STATE_CORRUPT = "STATE_CORRUPT"
    STATE_LOCK_TIMEOUT = "STATE_LOCK_TIMEOUT"

    # === CLI ===
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"
