from constructs import Construct

from common.config import IngressPolicy, StackConfig
from compute.fargate import FargateServiceSpec, build_fargate_service
from networking.security_groups import (
    SecurityGroupGraph,
    SecurityGroupSpec,
    ingress_for_policy,
)
from networking.vpc import NetworkLayout, build_vpc
from topologies.topology_stack import TopologyStack


class FargateServiceStack(TopologyStack):
    """Single-zone VPC without NAT running one Fargate service from ECR.

    With zero NAT gateways the only subnets are public, so the tasks get a
    public IP to pull their image.
    """

    topology = "fargate"
    az_count = 1

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: StackConfig,
        service: FargateServiceSpec,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, config, **kwargs)

        self.layout = NetworkLayout(
            availability_zones=self.availability_zones,
            public_subnet_group=self.context.build_resource_name("subnet-group"),
            enable_dns_hostnames=True,
        )
        self.vpc = build_vpc(self.context, self.layout)

        self.security_groups = SecurityGroupGraph(self.context, self.vpc)
        self.security_groups.declare(
            SecurityGroupSpec(
                key="service",
                description="Allow all traffic",
                ingress=[ingress_for_policy(IngressPolicy.OPEN)],
            )
        )
        self.cluster, self.service = build_fargate_service(
            self.context,
            self.vpc,
            self.layout,
            self.security_groups["service"],
            service,
        )

        self.export_endpoint(
            "ClusterArn",
            value=self.cluster.cluster_arn,
            description="The ARN of the Fargate Cluster",
            export_name="fargate-cluster-arn",
        )
