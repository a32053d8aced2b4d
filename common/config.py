"""Construction parameters shared by every topology stack.

Values come from CDK context (``cdk synth -c scope=dev -c region=us-east-1``)
with the CDK CLI defaults as fallback for account and region. Every class here
validates on construction so that a bad parameter stops the build before any
resource is declared.
"""
import os
import re
from enum import Enum
from typing import Any, Optional

from attrs import define, field
from attrs.validators import instance_of, optional
from aws_cdk import Environment, Token, aws_elasticloadbalancingv2 as elbv2
from constructs import Node

import common.constants as constants
from common.errors import ConfigurationError


class IngressPolicy(str, Enum):
    OPEN = "open"  # any IPv4 source, all TCP
    SCOPED = "scoped"  # upstream security group only, HTTP port


def _valid_scope(instance: Any, attribute: Any, value: Optional[str]) -> None:
    if not value:
        raise ConfigurationError(
            "A scope is required, pass it with `-c scope=<name>`"
        )
    if not re.match(constants.SCOPE_PATTERN, value):
        raise ConfigurationError(
            f"Scope {value!r} may only contain letters, digits and hyphens"
        )
    if len(value) > constants.SCOPE_MAX_LENGTH:
        raise ConfigurationError(
            f"Scope {value!r} is longer than {constants.SCOPE_MAX_LENGTH} characters"
        )


def positive(instance: Any, attribute: Any, value: int) -> None:
    if value <= 0:
        raise ConfigurationError(
            f"{type(instance).__name__}.{attribute.name} must be greater than 0, got {value}"
        )


def as_bool(value: Any, default: bool) -> bool:
    """Read a boolean from CDK context, which hands `-c` values over as strings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@define(slots=True, frozen=True, kw_only=True)
class StackConfig:
    scope: str = field(
        validator=_valid_scope,
        metadata={"description": "Deployment tag embedded in every resource name"},
    )
    account: Optional[str] = field(default=None, validator=optional(instance_of(str)))
    region: Optional[str] = field(default=None, validator=optional(instance_of(str)))

    @property
    def environment(self) -> Environment:
        return Environment(account=self.account, region=self.region)

    def availability_zones(self, count: int = len(constants.AZ_SUFFIXES)) -> list[str]:
        """Resolve ``<region>a``, ``<region>b`` ... for the first ``count`` zones."""
        if not self.region or Token.is_unresolved(self.region):
            raise ConfigurationError(
                "AWS region is not set, unable to resolve availability zones. "
                "Pass `-c region=<region>` or set CDK_DEFAULT_REGION"
            )
        if not 0 < count <= len(constants.AZ_SUFFIXES):
            raise ConfigurationError(
                f"Between 1 and {len(constants.AZ_SUFFIXES)} availability zones are supported, got {count}"
            )
        return [f"{self.region}{suffix}" for suffix in constants.AZ_SUFFIXES[:count]]

    @classmethod
    def from_node(cls, node: Node) -> "StackConfig":
        return cls(
            scope=node.try_get_context("scope"),
            account=node.try_get_context("account") or os.getenv("CDK_DEFAULT_ACCOUNT"),
            region=node.try_get_context("region") or os.getenv("CDK_DEFAULT_REGION"),
        )


@define(slots=True, frozen=True, kw_only=True)
class HealthCheckPolicy:
    enabled: bool = field(default=True, validator=instance_of(bool))
    healthy_threshold_count: int = field(
        default=constants.HEALTHY_THRESHOLD_COUNT, validator=[instance_of(int), positive]
    )
    protocol: Optional[elbv2.Protocol] = field(default=None)

    def to_health_check(self) -> elbv2.HealthCheck:
        return elbv2.HealthCheck(
            enabled=self.enabled,
            healthy_threshold_count=self.healthy_threshold_count,
            protocol=self.protocol,
        )


ECR_REPOSITORY_ARN = re.compile(r"^arn:aws[a-z-]*:ecr:[a-z0-9-]+:\d+:repository/.+$")


def _valid_ecr_arn(instance: Any, attribute: Any, value: Optional[str]) -> None:
    if not value:
        raise ConfigurationError(
            "An ECR repository ARN is required, pass it with `-c ecrArn=<arn>`"
        )
    if not ECR_REPOSITORY_ARN.match(value):
        raise ConfigurationError(f"{value!r} is not an ECR repository ARN")


@define(slots=True, frozen=True, kw_only=True)
class ContainerImageRef:
    ecr_arn: str = field(validator=_valid_ecr_arn)
    tag: str = field(default=constants.DEFAULT_IMAGE_TAG, validator=instance_of(str))
