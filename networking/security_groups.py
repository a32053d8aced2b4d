"""Security-group graph: the permission chain between tiers of a topology.

Groups are declared in order. An ingress rule names its source either as a
CIDR or as the key of an upstream group, and the upstream group must already be
declared. Declaring groups internet-first therefore guarantees there are no
forward references in the resulting graph.
"""
import logging
from typing import Optional

from attrs import define, field
from attrs.validators import instance_of, optional
from aws_cdk import aws_ec2 as ec2

from common import constants
from common.config import IngressPolicy
from common.errors import ConfigurationError
from common.stack_context import StackContext

logger = logging.getLogger(__name__)


@define(slots=True, frozen=True, kw_only=True)
class IngressRule:
    description: str = field(validator=instance_of(str))
    port: Optional[int] = field(default=None, validator=optional(instance_of(int)))
    cidr: Optional[str] = field(default=None, validator=optional(instance_of(str)))
    source_group: Optional[str] = field(default=None, validator=optional(instance_of(str)))

    def __attrs_post_init__(self) -> None:
        if (self.cidr is None) == (self.source_group is None):
            raise ConfigurationError(
                f"Ingress rule {self.description!r} needs exactly one source: a CIDR or a security group"
            )

    @property
    def connection(self) -> ec2.Port:
        if self.port is None:
            return ec2.Port.all_tcp()
        return ec2.Port.tcp(self.port)

    @classmethod
    def any_ipv4(cls, port: Optional[int] = None, description: str = "Allow all TCP") -> "IngressRule":
        return cls(cidr=constants.ANY_IPV4_CIDR, port=port, description=description)

    @classmethod
    def from_cidr(cls, cidr: str, port: Optional[int], description: str) -> "IngressRule":
        return cls(cidr=cidr, port=port, description=description)

    @classmethod
    def from_group(cls, key: str, port: Optional[int], description: str) -> "IngressRule":
        return cls(source_group=key, port=port, description=description)


def ingress_for_policy(
    policy: IngressPolicy, upstream: Optional[str] = None, description: Optional[str] = None
) -> IngressRule:
    """Build the single ingress rule of a tier under the given policy.

    ``open`` admits any IPv4 source on every TCP port. ``scoped`` admits only
    the upstream tier's security group, on the HTTP port, and is the only
    case where ``description`` is used.
    """
    if policy is IngressPolicy.OPEN:
        return IngressRule.any_ipv4()
    if upstream is None:
        raise ConfigurationError("A scoped ingress rule needs an upstream security group")
    return IngressRule.from_group(
        upstream,
        port=constants.HTTP_PORT,
        description=description or f"Allow HTTP from the {upstream} tier",
    )


@define(slots=True, frozen=True, kw_only=True)
class SecurityGroupSpec:
    key: str = field(validator=instance_of(str))
    description: str = field(validator=instance_of(str))
    ingress: tuple[IngressRule, ...] = field(default=(), converter=tuple)
    allow_all_outbound: bool = field(default=True)


class SecurityGroupGraph:
    """Declares security groups in construction order and wires their ingress."""

    def __init__(self, context: StackContext, vpc: ec2.IVpc) -> None:
        self.context = context
        self.vpc = vpc
        self._groups: dict[str, ec2.SecurityGroup] = {}

    def __getitem__(self, key: str) -> ec2.SecurityGroup:
        try:
            return self._groups[key]
        except KeyError:
            raise ConfigurationError(f"Security group {key!r} has not been declared") from None

    def declare(self, spec: SecurityGroupSpec) -> ec2.SecurityGroup:
        if spec.key in self._groups:
            raise ConfigurationError(f"Security group {spec.key!r} is declared twice")

        # Resolve every peer before creating anything so a bad reference
        # leaves the stack untouched.
        peers = [(self._resolve_peer(spec, rule), rule) for rule in spec.ingress]

        resource_type = f"{spec.key}-security-group"
        group = ec2.SecurityGroup(
            self.context.stack,
            self.context.build_resource_id(resource_type),
            vpc=self.vpc,
            security_group_name=self.context.build_resource_name(resource_type),
            description=spec.description,
            allow_all_outbound=spec.allow_all_outbound,
        )
        for peer, rule in peers:
            logger.debug("%s: ingress %s on %s", spec.key, rule.description, rule.connection)
            group.add_ingress_rule(peer, rule.connection, rule.description)

        self._groups[spec.key] = group
        return group

    def _resolve_peer(self, spec: SecurityGroupSpec, rule: IngressRule) -> ec2.IPeer:
        if rule.cidr is not None:
            if rule.cidr == constants.ANY_IPV4_CIDR:
                return ec2.Peer.any_ipv4()
            return ec2.Peer.ipv4(rule.cidr)
        if rule.source_group not in self._groups:
            raise ConfigurationError(
                f"Ingress rule {rule.description!r} on security group {spec.key!r} "
                f"references {rule.source_group!r}, which is not declared before it"
            )
        return self._groups[rule.source_group]
