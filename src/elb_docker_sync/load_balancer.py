from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import LoadBalancerError, TargetGroupNotFoundError
from .models import Target


class LoadBalancer(Protocol):
    def resolve_target_group(self, name: str) -> str: ...

    def describe_target_health(self, handle: str) -> list[tuple[str, int]]: ...

    def register_target(self, handle: str, target: Target) -> None: ...

    def deregister_target(self, handle: str, target: Target) -> None: ...


def _error_code(e: Exception) -> str | None:
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Code")
    return None


class ElbV2LoadBalancer:
    """Target group operations against the ELBv2 control plane."""

    def __init__(self, region: str = "us-east-1", client: Any = None):
        self.region = region
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("elbv2", region_name=self.region)
        return self._client

    def _call(self, operation: str, **params) -> dict[str, Any]:
        try:
            return getattr(self.client, operation)(**params)
        except (ClientError, BotoCoreError) as e:
            raise LoadBalancerError(f"{operation} failed: {e}", code=_error_code(e)) from e

    def resolve_target_group(self, name: str) -> str:
        """Map a target group name to its ARN; exactly one exact match is accepted."""
        try:
            resp = self.client.describe_target_groups(Names=[name])
        except ClientError as e:
            if _error_code(e) == "TargetGroupNotFound":
                raise TargetGroupNotFoundError(name) from e
            raise LoadBalancerError(f"describe_target_groups failed: {e}", code=_error_code(e)) from e
        except BotoCoreError as e:
            raise LoadBalancerError(f"describe_target_groups failed: {e}") from e

        matches = [tg for tg in resp.get("TargetGroups", []) if tg.get("TargetGroupName") == name]
        if len(matches) != 1:
            raise TargetGroupNotFoundError(name, matches=len(matches))
        return matches[0]["TargetGroupArn"]

    def describe_target_health(self, handle: str) -> list[tuple[str, int]]:
        resp = self._call("describe_target_health", TargetGroupArn=handle)
        return [
            (desc["Target"]["Id"], int(desc["Target"]["Port"]))
            for desc in resp.get("TargetHealthDescriptions", [])
            if "Port" in desc["Target"]
        ]

    def register_target(self, handle: str, target: Target) -> None:
        self._call("register_targets", TargetGroupArn=handle, Targets=[{"Id": target.host_id, "Port": target.port}])

    def deregister_target(self, handle: str, target: Target) -> None:
        self._call("deregister_targets", TargetGroupArn=handle, Targets=[{"Id": target.host_id, "Port": target.port}])
