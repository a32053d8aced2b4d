from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from common.config import HealthCheckPolicy, IngressPolicy, StackConfig
from compute.instances import build_web_instances
from exposure.api_gateway import build_http_api_alb_integration
from exposure.load_balancers import build_application_load_balancer
from networking.security_groups import (
    SecurityGroupGraph,
    SecurityGroupSpec,
    ingress_for_policy,
)
from networking.vpc import NetworkLayout, build_vpc
from topologies.topology_stack import TopologyStack


class HttpApiAlbStack(TopologyStack):
    """HTTP API -> VPC Link -> internal ALB -> two web servers.

    The ALB is not internet routable; only the VPC Link's security group may
    reach it, and only the ALB's security group may reach the instances.
    """

    topology = "http-api-alb"

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
        self.alb, self.listener = build_application_load_balancer(
            self.context,
            self.vpc,
            self.security_groups["alb"],
            self.instances,
            name=self.context.build_resource_name("alb", action=self.topology),
            internet_facing=False,
            health_check=health_check,
        )
        self.http_api = build_http_api_alb_integration(
            self.context, self.vpc, self.security_groups["vpc-link"], self.listener
        )

        self.export_endpoint(
            "ApiEndpoint",
            value=self.http_api.api_endpoint,
            description="API Endpoint",
            export_name="api-gateway-endpoint",
        )

    def _build_security_groups(self, vpc: ec2.IVpc) -> SecurityGroupGraph:
        graph = SecurityGroupGraph(self.context, vpc)
        graph.declare(
            SecurityGroupSpec(
                key="vpc-link",
                description="Allow all traffic",
                ingress=[ingress_for_policy(IngressPolicy.OPEN)],
            )
        )
        graph.declare(
            SecurityGroupSpec(
                key="alb",
                description="Allow TCP connection from VPC Link on port 80",
                ingress=[
                    ingress_for_policy(
                        IngressPolicy.SCOPED,
                        upstream="vpc-link",
                        description="Allow TCP connection from VPC Link on port 80",
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
