from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from common import constants
from common.config import HealthCheckPolicy, IngressPolicy, StackConfig
from compute.instances import build_web_instances
from exposure.load_balancers import build_application_load_balancer
from networking.security_groups import (
    IngressRule,
    SecurityGroupGraph,
    SecurityGroupSpec,
    ingress_for_policy,
)
from networking.vpc import NetworkLayout, build_vpc
from topologies.topology_stack import TopologyStack


class AlbEc2Stack(TopologyStack):
    """Internet-facing ALB in front of two web servers in private subnets.

    ``ingress_policy`` picks between the naive topology (every tier admits all
    TCP from anywhere) and the hardened one (the ALB admits HTTP from anywhere,
    the instances admit HTTP only from the ALB's security group).
    ``export_endpoint`` controls whether the ALB DNS name is exported across
    stacks; it is always published as an output.
    """

    topology = "alb-ec2"

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: StackConfig,
        ingress_policy: IngressPolicy = IngressPolicy.SCOPED,
        export_endpoint: bool = True,
        health_check: HealthCheckPolicy = HealthCheckPolicy(),
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, config, **kwargs)
        self.ingress_policy = ingress_policy

        self.layout = NetworkLayout(availability_zones=self.availability_zones)
        self.vpc = build_vpc(self.context, self.layout)

        self.security_groups = self._build_security_groups(self.vpc)
        self.instances = build_web_instances(
            self.context, self.vpc, self.layout, self.security_groups["ec2-instance"]
        )
        self.alb, self.listener = build_application_load_balancer(
            self.context,
            self.vpc,
            self.security_groups["alb"],
            self.instances,
            name=self.context.build_resource_name("alb", action=self.topology),
            internet_facing=True,
            health_check=health_check,
        )

        self.export_endpoint(
            "AlbDnsName",
            value=self.alb.load_balancer_dns_name,
            description="The DNS name of the ALB",
            export_name="alb-dns-name" if export_endpoint else None,
        )

    def _build_security_groups(self, vpc: ec2.IVpc) -> SecurityGroupGraph:
        graph = SecurityGroupGraph(self.context, vpc)
        if self.ingress_policy is IngressPolicy.OPEN:
            alb_ingress = IngressRule.any_ipv4()
        else:
            alb_ingress = IngressRule.any_ipv4(
                port=constants.HTTP_PORT, description="Allow HTTP from the internet"
            )
        graph.declare(
            SecurityGroupSpec(
                key="alb",
                description="Internet-facing ALB",
                ingress=[alb_ingress],
            )
        )
        graph.declare(
            SecurityGroupSpec(
                key="ec2-instance",
                description="EC2 Security Group",
                ingress=[
                    ingress_for_policy(
                        self.ingress_policy,
                        upstream="alb",
                        description="Allow connection from the ALB",
                    )
                ],
            )
        )
        return graph
