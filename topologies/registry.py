"""Select and build topology stacks from CDK context.

    cdk synth -c scope=dev -c region=us-east-1 -c topology=alb-ec2,nlb-alb
"""
import logging
from typing import Callable

from aws_cdk import App

from common import constants
from common.config import (
    ContainerImageRef,
    IngressPolicy,
    StackConfig,
    as_bool,
)
from common.errors import ConfigurationError
from compute.fargate import FargateServiceSpec
from topologies.alb_ec2_stack import AlbEc2Stack
from topologies.fargate_service_stack import FargateServiceStack
from topologies.http_api_alb_stack import HttpApiAlbStack
from topologies.http_api_lambda_stack import HttpApiLambdaStack
from topologies.nlb_alb_stack import NlbAlbStack
from topologies.topology_stack import TopologyStack
from topologies.websocket_api_stack import WebSocketApiStack

logger = logging.getLogger(__name__)

StackBuilder = Callable[[App, StackConfig], TopologyStack]


def _stack_name(topology: str, config: StackConfig) -> str:
    return f"{topology}-{config.scope}"


def _ingress_policy(app: App) -> IngressPolicy:
    value = app.node.try_get_context("ingressPolicy") or IngressPolicy.SCOPED.value
    try:
        return IngressPolicy(value)
    except ValueError:
        allowed = ", ".join(policy.value for policy in IngressPolicy)
        raise ConfigurationError(
            f"Unknown ingress policy {value!r}, expected one of: {allowed}"
        ) from None


def build_alb_ec2(app: App, config: StackConfig) -> TopologyStack:
    return AlbEc2Stack(
        app,
        "AlbEc2Stack",
        config=config,
        stack_name=_stack_name(AlbEc2Stack.topology, config),
        ingress_policy=_ingress_policy(app),
        export_endpoint=as_bool(app.node.try_get_context("exportEndpoint"), default=True),
    )


def build_http_api_alb(app: App, config: StackConfig) -> TopologyStack:
    return HttpApiAlbStack(
        app,
        "HttpApiAlbStack",
        config=config,
        stack_name=_stack_name(HttpApiAlbStack.topology, config),
    )


def build_http_api_lambda(app: App, config: StackConfig) -> TopologyStack:
    return HttpApiLambdaStack(
        app,
        "HttpApiLambdaStack",
        config=config,
        stack_name=_stack_name(HttpApiLambdaStack.topology, config),
    )


def build_websocket_api(app: App, config: StackConfig) -> TopologyStack:
    return WebSocketApiStack(
        app,
        "WebSocketApiStack",
        config=config,
        stack_name=_stack_name(WebSocketApiStack.topology, config),
    )


def build_nlb_alb(app: App, config: StackConfig) -> TopologyStack:
    return NlbAlbStack(
        app,
        "NlbAlbStack",
        config=config,
        stack_name=_stack_name(NlbAlbStack.topology, config),
    )


def build_fargate(app: App, config: StackConfig) -> TopologyStack:
    image = ContainerImageRef(
        ecr_arn=app.node.try_get_context("ecrArn"),
        tag=app.node.try_get_context("imageTag") or constants.DEFAULT_IMAGE_TAG,
    )
    return FargateServiceStack(
        app,
        "FargateServiceStack",
        config=config,
        service=FargateServiceSpec(image=image),
        stack_name=_stack_name(FargateServiceStack.topology, config),
    )


TOPOLOGIES: dict[str, StackBuilder] = {
    AlbEc2Stack.topology: build_alb_ec2,
    HttpApiAlbStack.topology: build_http_api_alb,
    HttpApiLambdaStack.topology: build_http_api_lambda,
    WebSocketApiStack.topology: build_websocket_api,
    NlbAlbStack.topology: build_nlb_alb,
    FargateServiceStack.topology: build_fargate,
}


def requested_topologies(app: App) -> list[str]:
    requested = app.node.try_get_context("topology") or constants.DEFAULT_TOPOLOGY
    if requested == constants.DEFAULT_TOPOLOGY:
        return list(TOPOLOGIES)
    names = [name.strip() for name in requested.split(",") if name.strip()]
    unknown = [name for name in names if name not in TOPOLOGIES]
    if unknown or not names:
        raise ConfigurationError(
            f"Unknown topology {', '.join(unknown) or requested!r}, "
            f"expected `all` or any of: {', '.join(TOPOLOGIES)}"
        )
    return names


def build_topologies(app: App) -> list[TopologyStack]:
    """Build every requested topology; any configuration error stops before synth."""
    config = StackConfig.from_node(app.node)
    stacks = []
    for name in requested_topologies(app):
        logger.info("Building topology %s for scope %s", name, config.scope)
        stacks.append(TOPOLOGIES[name](app, config))
    return stacks
