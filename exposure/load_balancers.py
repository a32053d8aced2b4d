from typing import Sequence

from aws_cdk import (
    aws_ec2 as ec2,
    aws_elasticloadbalancingv2 as elbv2,
    aws_elasticloadbalancingv2_targets as elbv2_targets,
)

from common import constants
from common.config import HealthCheckPolicy
from common.stack_context import StackContext


def build_application_load_balancer(
    context: StackContext,
    vpc: ec2.IVpc,
    security_group: ec2.ISecurityGroup,
    instances: Sequence[ec2.Instance],
    name: str,
    internet_facing: bool,
    health_check: HealthCheckPolicy,
) -> tuple[elbv2.ApplicationLoadBalancer, elbv2.ApplicationListener]:
    """ALB on port 80 fanning out to the given instances over HTTP.

    `name` is used for both the load balancer and its target group, and must be
    unique per account and region for each of them.
    """
    alb = elbv2.ApplicationLoadBalancer(
        context.stack,
        "Alb",
        load_balancer_name=name,
        vpc=vpc,
        security_group=security_group,
        internet_facing=internet_facing,
        deletion_protection=False,
    )
    # Ingress to the ALB is owned by its security group, never by the listener.
    listener = alb.add_listener(
        "HttpListener",
        port=constants.HTTP_PORT,
        open=False,
    )
    listener.add_targets(
        "Targets",
        protocol=elbv2.ApplicationProtocol.HTTP,
        port=constants.HTTP_PORT,
        targets=[elbv2_targets.InstanceTarget(instance) for instance in instances],
        target_group_name=name,
        health_check=health_check.to_health_check(),
    )
    return alb, listener


def build_network_load_balancer_to_alb(
    context: StackContext,
    vpc: ec2.IVpc,
    alb: elbv2.ApplicationLoadBalancer,
    alb_listener: elbv2.ApplicationListener,
    health_check: HealthCheckPolicy,
) -> elbv2.NetworkLoadBalancer:
    """Internet-facing NLB forwarding TCP 80 to an ALB."""
    nlb = elbv2.NetworkLoadBalancer(
        context.stack,
        "Nlb",
        load_balancer_name=context.build_resource_name("nlb-ec2-instance"),
        vpc=vpc,
        internet_facing=True,
        cross_zone_enabled=True,
        vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
        deletion_protection=False,
    )
    target_group = elbv2.NetworkTargetGroup(
        context.stack,
        "NlbTargetGroup",
        target_group_name=context.build_resource_name("nlb-targets-alb"),
        vpc=vpc,
        port=constants.HTTP_PORT,
        protocol=elbv2.Protocol.TCP,
        targets=[elbv2_targets.AlbTarget(alb, constants.HTTP_PORT)],
        health_check=health_check.to_health_check(),
    )
    nlb.add_listener(
        "NlbListener",
        port=constants.HTTP_PORT,
        default_target_groups=[target_group],
    )

    # The target group only holds the ALB's ARN, so CloudFormation cannot see
    # that it must be deleted before the ALB listener.
    target_group.node.add_dependency(alb_listener)
    return nlb
