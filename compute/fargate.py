from attrs import define, field
from attrs.validators import instance_of
from aws_cdk import (
    aws_ec2 as ec2,
    aws_ecr as ecr,
    aws_ecs as ecs,
    aws_logs as logs,
)

from common import constants
from common.config import ContainerImageRef, positive
from common.stack_context import StackContext
from networking.vpc import NetworkLayout


@define(slots=True, frozen=True, kw_only=True)
class FargateServiceSpec:
    image: ContainerImageRef = field(validator=instance_of(ContainerImageRef))
    cpu: int = field(default=constants.FARGATE_CPU, validator=positive)
    memory_limit_mib: int = field(default=constants.FARGATE_MEMORY_MIB, validator=positive)
    container_port: int = field(default=constants.CONTAINER_PORT, validator=positive)
    desired_count: int = field(default=1, validator=positive)
    log_retention: logs.RetentionDays = field(default=constants.DEFAULT_LOG_RETENTION)


def build_fargate_service(
    context: StackContext,
    vpc: ec2.IVpc,
    layout: NetworkLayout,
    security_group: ec2.ISecurityGroup,
    spec: FargateServiceSpec,
) -> tuple[ecs.Cluster, ecs.FargateService]:
    stack = context.stack
    repository = ecr.Repository.from_repository_arn(stack, "Repository", spec.image.ecr_arn)

    cluster = ecs.Cluster(
        stack,
        "Cluster",
        cluster_name=context.build_resource_name("cluster"),
        vpc=vpc,
        enable_fargate_capacity_providers=True,
    )

    task_definition = ecs.FargateTaskDefinition(
        stack,
        "FargateTaskDefinition",
        cpu=spec.cpu,
        memory_limit_mib=spec.memory_limit_mib,
        family=context.build_resource_name("fargate-family"),
    )
    task_definition.add_container(
        "ApiContainer",
        image=ecs.ContainerImage.from_ecr_repository(repository, spec.image.tag),
        essential=True,
        port_mappings=[ecs.PortMapping(container_port=spec.container_port)],
        logging=ecs.LogDrivers.aws_logs(
            stream_prefix=context.build_resource_name("api-logs"),
            log_group=context.build_log_group(
                f"/api/{context.scope}", retention=spec.log_retention
            ),
        ),
    )

    # Without NAT gateways the layout puts the tasks in public subnets with a
    # public IP, otherwise the image pull has no route out.
    service = ecs.FargateService(
        stack,
        "FargateService",
        service_name=context.build_resource_name("api-service"),
        cluster=cluster,
        task_definition=task_definition,
        desired_count=spec.desired_count,
        assign_public_ip=layout.assign_public_ip,
        vpc_subnets=layout.compute_subnets,
        platform_version=ecs.FargatePlatformVersion.VERSION1_4,
        security_groups=[security_group],
    )
    return cluster, service
