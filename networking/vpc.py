from typing import Optional

from attrs import define, field
from attrs.validators import instance_of, optional
from aws_cdk import aws_ec2 as ec2

from common import constants
from common.errors import ConfigurationError
from common.stack_context import StackContext


@define(slots=True, frozen=True, kw_only=True)
class NetworkLayout:
    """Address space and subnet layout of a topology's VPC.

    Two layouts exist:

    - two-tier (default): one public and one private-with-egress subnet per
      zone, with NAT gateways (one per zone unless ``nat_gateways`` says otherwise).
    - public-only: a single public subnet group named ``public_subnet_group``
      and zero NAT gateways.

    Compute placement follows the layout. Without NAT gateways a private subnet
    has no route out, so compute that must pull images or packages lands in the
    public subnets with a public IP instead.
    """

    availability_zones: tuple[str, ...] = field(converter=tuple)
    public_subnet_group: Optional[str] = field(default=None, validator=optional(instance_of(str)))
    nat_gateways: Optional[int] = field(default=None)
    cidr_mask: int = field(default=constants.PUBLIC_ONLY_CIDR_MASK)
    enable_dns_hostnames: bool = field(default=False)

    def __attrs_post_init__(self) -> None:
        if not self.availability_zones:
            raise ConfigurationError("A network needs at least one availability zone")
        if self.public_only and self.nat_gateways:
            raise ConfigurationError(
                "A public-only network has no private subnets to route through NAT gateways"
            )
        if not self.public_only and self.nat_gateways == 0:
            raise ConfigurationError(
                "Private-with-egress subnets need at least one NAT gateway; "
                "use a public-only layout for a network without NAT"
            )

    @property
    def public_only(self) -> bool:
        return self.public_subnet_group is not None

    @property
    def compute_subnet_type(self) -> ec2.SubnetType:
        if self.public_only:
            return ec2.SubnetType.PUBLIC
        return ec2.SubnetType.PRIVATE_WITH_EGRESS

    @property
    def assign_public_ip(self) -> bool:
        return self.compute_subnet_type == ec2.SubnetType.PUBLIC

    @property
    def compute_subnets(self) -> ec2.SubnetSelection:
        return ec2.SubnetSelection(subnet_type=self.compute_subnet_type)


def build_vpc(context: StackContext, layout: NetworkLayout) -> ec2.Vpc:
    if layout.public_only:
        return ec2.Vpc(
            context.stack,
            "Vpc",
            vpc_name=context.build_resource_name("vpc"),
            ip_addresses=ec2.IpAddresses.cidr(constants.VPC_CIDR),
            enable_dns_hostnames=layout.enable_dns_hostnames,
            enable_dns_support=True,
            default_instance_tenancy=ec2.DefaultInstanceTenancy.DEFAULT,
            availability_zones=list(layout.availability_zones),
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name=layout.public_subnet_group,
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=layout.cidr_mask,
                ),
            ],
        )

    # Default subnet configuration: one public and one private-with-egress
    # subnet per zone, NAT gateways in the public ones.
    return ec2.Vpc(
        context.stack,
        "Vpc",
        vpc_name=context.build_resource_name("vpc"),
        ip_addresses=ec2.IpAddresses.cidr(constants.VPC_CIDR),
        enable_dns_hostnames=layout.enable_dns_hostnames,
        enable_dns_support=True,
        availability_zones=list(layout.availability_zones),
        nat_gateways=layout.nat_gateways,
    )
