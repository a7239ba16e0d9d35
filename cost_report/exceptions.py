"""
Cost Report Exceptions.

리포트 생성 중 발생하는 치명적 오류. 모든 오류는 재시도 없이 실행을 중단합니다.
"""


class CostReportError(Exception):
    """Base error for cost report generation."""


class PrerequisiteError(CostReportError):
    """Raised when required tooling (AWS SDK) is not available."""


class CredentialsError(CostReportError):
    """Raised when credentials for a profile are missing or invalid."""

    def __init__(self, profile: str, reason: str):
        self.profile = profile
        self.reason = reason
        super().__init__(f"AWS credentials for profile '{profile}' are not configured or invalid: {reason}")


class CostDataError(CostReportError):
    """Raised when Cost Explorer returns an empty or malformed response."""
