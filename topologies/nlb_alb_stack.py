from aws_cdk import aws_ec2 as ec2, aws_elasticloadbalancingv2 as elbv2
from constructs import Construct

from common import constants
from common.config import HealthCheckPolicy, IngressPolicy, StackConfig
from compute.instances import build_web_instances
from exposure.load_balancers import (
    build_application_load_balancer,
    build_network_load_balancer_to_alb,
)
from networking.security_groups import (
    IngressRule,
    SecurityGroupGraph,
    SecurityGroupSpec,
    ingress_for_policy,
)
from networking.vpc import NetworkLayout, build_vpc
from topologies.topology_stack import TopologyStack


class NlbAlbStack(TopologyStack):
    """Internet-facing NLB (L4) in front of an internal ALB (L7) in front of EC2."""

    topology = "nlb-alb"

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: StackConfig,
        health_check: HealthCheckPolicy = HealthCheckPolicy(),
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, config, **kwargs)

        self.layout = NetworkLayout(availability_zones=self.availability_zones)
        self.vpc = build_vpc(self.context, self.layout)

        self.security_groups = self._build_security_groups(self.vpc)
        self.instances = build_web_instances(
            self.context, self.vpc, self.layout, self.security_groups["ec2-instance"]
        )
        self.alb, self.alb_listener = build_application_load_balancer(
            self.context,
            self.vpc,
            self.security_groups["alb"],
            self.instances,
            name=self.context.build_resource_name("alb", action=self.topology),
            internet_facing=False,
            health_check=health_check,
        )
        # Target groups of type `alb` only accept HTTP(S) health checks.
        self.nlb = build_network_load_balancer_to_alb(
            self.context,
            self.vpc,
            self.alb,
            self.alb_listener,
            health_check=HealthCheckPolicy(
                enabled=health_check.enabled,
                healthy_threshold_count=health_check.healthy_threshold_count,
                protocol=elbv2.Protocol.HTTP,
            ),
        )

        self.export_endpoint(
            "NlbDnsName",
            value=self.nlb.load_balancer_dns_name,
            description="The DNS name of the NLB",
            export_name="nlb-dns-name",
        )

    def _build_security_groups(self, vpc: ec2.IVpc) -> SecurityGroupGraph:
        graph = SecurityGroupGraph(self.context, vpc)
        # The NLB has no security group; traffic it forwards to the ALB comes
        # from its private addresses inside the VPC.
        graph.declare(
            SecurityGroupSpec(
                key="alb",
                description="Allow HTTP from the NLB inside the VPC",
                ingress=[
                    IngressRule.from_cidr(
                        vpc.vpc_cidr_block,
                        port=constants.HTTP_PORT,
                        description="Allow connection from the VPC (including the NLB)",
                    )
                ],
            )
        )
        graph.declare(
            SecurityGroupSpec(
                key="ec2-instance",
                description="EC2 Security Group",
                ingress=[
                    ingress_for_policy(
                        IngressPolicy.SCOPED,
                        upstream="alb",
                        description="Allow connection from the ALB",
                    )
                ],
            )
        )
        return graph
