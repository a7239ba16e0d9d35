"""
Cost Explorer Provider.

AWS 프로필(credential) 단위 Cost Explorer 접근. 프로필 × 기간마다
GetCostAndUsage 1회 호출 (재시도 없음, 순차 실행).
"""

import logging
import os
import random
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from cost_report.exceptions import CostDataError, CredentialsError, PrerequisiteError
from cost_report.services.models import CostRecord, ProfileIdentity, ReportWindow

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"
COST_METRIC = "UnblendedCost"


def check_prerequisites() -> None:
    """AWS SDK 설치 여부 확인.

    Raises:
        PrerequisiteError: boto3가 설치되지 않은 경우
    """
    try:
        import boto3  # noqa: F401
    except ImportError as e:
        raise PrerequisiteError(
            "AWS SDK for Python (boto3) is not installed. Install: pip install boto3"
        ) from e


def parse_cost_response(profile: str, response: Dict[str, Any]) -> List[CostRecord]:
    """GetCostAndUsage 응답을 CostRecord 목록으로 변환.

    Args:
        profile: 응답을 조회한 프로필
        response: Cost Explorer 응답 (ResultsByTime 포함)

    Returns:
        일별 서비스 비용 레코드

    Raises:
        CostDataError: 응답 형식이 잘못된 경우
    """
    if not isinstance(response, dict) or "ResultsByTime" not in response:
        raise CostDataError(f"Malformed Cost Explorer response for profile '{profile}': missing ResultsByTime")

    records: List[CostRecord] = []

    for period in response["ResultsByTime"]:
        try:
            day = date.fromisoformat(period["TimePeriod"]["Start"])
        except (KeyError, TypeError, ValueError) as e:
            raise CostDataError(
                f"Malformed Cost Explorer response for profile '{profile}': bad TimePeriod ({e})"
            ) from e

        for group in period.get("Groups", []):
            keys = group.get("Keys") or []
            service_name = keys[0] if keys else "Unknown"
            try:
                amount = float(group["Metrics"][COST_METRIC]["Amount"])
            except (KeyError, TypeError, ValueError) as e:
                raise CostDataError(
                    f"Malformed Cost Explorer response for profile '{profile}': "
                    f"bad amount for {service_name} on {day} ({e})"
                ) from e

            records.append(CostRecord(profile=profile, service=service_name, day=day, amount=amount))

    return records


class BaseCostExplorerProvider(ABC):
    """Abstract base class for Cost Explorer providers."""

    @abstractmethod
    def get_identity(self, profile: str) -> ProfileIdentity:
        """Resolve and validate the credentials of a profile.

        Args:
            profile: AWS profile name

        Returns:
            ProfileIdentity with account id and caller ARN
        """
        pass

    @abstractmethod
    def get_cost_records(self, profile: str, window: ReportWindow) -> List[CostRecord]:
        """Get daily per-service cost records for a window.

        Args:
            profile: AWS profile name
            window: Report window (inclusive dates)

        Returns:
            List of CostRecord
        """
        pass

    def list_profiles(self) -> List[str]:
        """Get configured profile names."""
        return []


class CostExplorerProvider(BaseCostExplorerProvider):
    """
    boto3 기반 Cost Explorer Provider.

    프로필마다 boto3 Session을 생성하여 STS GetCallerIdentity로 자격 증명을 검증하고
    Cost Explorer GetCostAndUsage를 호출합니다. ``default`` 프로필은 boto3 기본
    credential chain (환경 변수, AWS_PROFILE, ~/.aws/credentials, IAM role)을 사용합니다.
    """

    def __init__(self, region: str = "us-east-1"):
        """Initialize provider.

        Args:
            region: AWS region for Cost Explorer (must be us-east-1)
        """
        check_prerequisites()

        self.region = region
        self._sessions: Dict[str, Any] = {}

        logger.info(f"CostExplorerProvider initialized: region={region}")

    def _get_session(self, profile: str) -> Any:
        """Get or create boto3 session for profile."""
        import boto3
        from botocore.exceptions import ProfileNotFound

        if profile in self._sessions:
            return self._sessions[profile]

        profile_name = None if profile == DEFAULT_PROFILE else profile
        try:
            session = boto3.Session(profile_name=profile_name, region_name=self.region)
        except ProfileNotFound as e:
            raise CredentialsError(profile, str(e)) from e

        self._sessions[profile] = session
        return session

    def list_profiles(self) -> List[str]:
        import boto3

        return list(boto3.Session().available_profiles)

    def get_identity(self, profile: str) -> ProfileIdentity:
        from botocore.exceptions import BotoCoreError, ClientError

        session = self._get_session(profile)
        try:
            response = session.client("sts", region_name=self.region).get_caller_identity()
        except (BotoCoreError, ClientError) as e:
            raise CredentialsError(profile, str(e)) from e

        identity = ProfileIdentity(
            profile=profile,
            account_id=response["Account"],
            arn=response.get("Arn", ""),
        )
        logger.info(f"Resolved profile {profile}: account={identity.account_id}")
        return identity

    def get_cost_records(self, profile: str, window: ReportWindow) -> List[CostRecord]:
        from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

        session = self._get_session(profile)
        ce_client = session.client("ce", region_name=self.region)

        params: Dict[str, Any] = {
            "TimePeriod": {
                "Start": window.start.isoformat(),
                "End": window.end_exclusive.isoformat(),
            },
            "Granularity": "DAILY",
            "Metrics": [COST_METRIC],
            "GroupBy": [{"Type": "DIMENSION", "Key": "SERVICE"}],
        }

        records: List[CostRecord] = []
        periods = 0

        while True:
            try:
                response = ce_client.get_cost_and_usage(**params)
            except NoCredentialsError as e:
                raise CredentialsError(profile, str(e)) from e
            except (BotoCoreError, ClientError) as e:
                raise CostDataError(
                    f"Failed to fetch cost data for profile '{profile}' "
                    f"({window.start} to {window.end}): {e}"
                ) from e

            records.extend(parse_cost_response(profile, response))
            periods += len(response["ResultsByTime"])

            next_token = response.get("NextPageToken")
            if not next_token:
                break
            params["NextPageToken"] = next_token

        if periods == 0:
            raise CostDataError(
                f"Empty Cost Explorer response for profile '{profile}' ({window.start} to {window.end})"
            )

        logger.info(
            f"Retrieved {len(records)} cost records from profile {profile} "
            f"({window.window_type.value}: {window.start} to {window.end})"
        )
        return records


class MockCostExplorerProvider(BaseCostExplorerProvider):
    """Mock provider for demos and unit testing.

    mock_data가 없으면 프로필 이름을 seed로 하는 결정적(deterministic) 합성 데이터를
    Cost Explorer 응답 형태로 생성합니다.
    """

    SERVICES = [
        ("Amazon Elastic Compute Cloud - Compute", 42.0, 0.12),  # USD base, variance ratio
        ("Amazon Relational Database Service", 18.0, 0.05),
        ("Amazon Simple Storage Service", 6.5, 0.08),
        ("AWS Lambda", 2.2, 0.30),
        ("Amazon CloudWatch", 1.4, 0.10),
        ("Tax", 0.0, 0.0),
    ]

    def __init__(
        self,
        identities: Optional[Dict[str, str]] = None,
        mock_data: Optional[Dict[str, List[CostRecord]]] = None,
        invalid_profiles: Optional[List[str]] = None,
    ):
        """Initialize mock provider.

        Args:
            identities: profile -> account id mapping
            mock_data: profile -> pre-configured records
            invalid_profiles: profiles that fail credential validation
        """
        self.identities = identities or {}
        self.mock_data = mock_data
        self.invalid_profiles = set(invalid_profiles or [])
        self.call_history: List[Dict[str, Any]] = []

    def list_profiles(self) -> List[str]:
        return list(self.identities) or [DEFAULT_PROFILE]

    def get_identity(self, profile: str) -> ProfileIdentity:
        self.call_history.append({"method": "get_identity", "profile": profile})

        if profile in self.invalid_profiles:
            raise CredentialsError(profile, "mock credentials rejected")

        account_id = self.identities.get(profile) or self._account_id_for(profile)
        return ProfileIdentity(
            profile=profile,
            account_id=account_id,
            arn=f"arn:aws:iam::{account_id}:user/{profile}",
        )

    def get_cost_records(self, profile: str, window: ReportWindow) -> List[CostRecord]:
        self.call_history.append(
            {"method": "get_cost_records", "profile": profile, "window": window.window_type.value}
        )

        if self.mock_data is not None:
            return [r for r in self.mock_data.get(profile, []) if window.contains(r.day)]

        return parse_cost_response(profile, self._generate_response(profile, window))

    def _account_id_for(self, profile: str) -> str:
        rng = random.Random(f"account:{profile}")
        return "".join(str(rng.randint(0, 9)) for _ in range(12))

    def _generate_response(self, profile: str, window: ReportWindow) -> Dict[str, Any]:
        """Generate a realistic Cost Explorer response."""
        results = []

        day = window.start
        while day <= window.end:
            rng = random.Random(f"costs:{profile}:{day.isoformat()}")
            groups = []
            for service_name, base_cost, variance in self.SERVICES:
                cost = base_cost * (1 + rng.uniform(-variance, variance))
                groups.append(
                    {
                        "Keys": [service_name],
                        "Metrics": {COST_METRIC: {"Amount": f"{cost:.10f}", "Unit": "USD"}},
                    }
                )
            results.append(
                {
                    "TimePeriod": {
                        "Start": day.isoformat(),
                        "End": (day + timedelta(days=1)).isoformat(),
                    },
                    "Groups": groups,
                    "Estimated": False,
                }
            )
            day += timedelta(days=1)

        return {"ResultsByTime": results}


def create_provider(
    provider_type: Optional[str] = None,
    **kwargs: Any,
) -> BaseCostExplorerProvider:
    """Factory function to create appropriate provider.

    Args:
        provider_type: Provider type (real, mock)
        **kwargs: Additional provider-specific arguments

    Returns:
        Provider instance
    """
    provider_type = provider_type or os.getenv("COST_REPORT_PROVIDER", "real")

    if provider_type == "mock":
        return MockCostExplorerProvider(**kwargs)
    return CostExplorerProvider(**kwargs)
