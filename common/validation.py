"""
CDK validation aspects for construction defects.

These aspects run during `cdk synth` and add error annotations, which make the
synth fail before a template reaches CloudFormation.

Usage:
    from common.validation import add_validation_aspects
    add_validation_aspects(stack)
"""

import aws_cdk as cdk
import jsii
from aws_cdk import aws_elasticloadbalancingv2 as elbv2
from constructs import IConstruct

ALB_TARGET_TYPE = "alb"


@jsii.implements(cdk.IAspect)
class ListenerDependencyAspect:
    """
    Requires an explicit ordering edge from an NLB target group to the ALB
    listener it forwards to.

    A target group of type `alb` only references the ALB's ARN, so CloudFormation
    may delete the ALB listener while the target group still points at it.
    """

    def visit(self, node: IConstruct) -> None:
        if not isinstance(node, elbv2.NetworkTargetGroup):
            return
        resource = node.node.default_child
        target_type = cdk.Stack.of(node).resolve(resource.target_type)
        if target_type != ALB_TARGET_TYPE:
            return
        if not any(
            isinstance(dependency, elbv2.ApplicationListener)
            for dependency in node.node.dependencies
        ):
            cdk.Annotations.of(node).add_error(
                "NLB target group forwards to an ALB but declares no ordering "
                "dependency on the ALB listener; add node.add_dependency(listener)"
            )


@jsii.implements(cdk.IAspect)
class SingleEndpointAspect:
    """
    Requires each topology stack to publish exactly one endpoint output.
    """

    def visit(self, node: IConstruct) -> None:
        if not isinstance(node, cdk.Stack):
            return
        outputs = [
            child
            for child in node.node.find_all()
            if isinstance(child, cdk.CfnOutput)
            and cdk.Stack.of(child).node.path == node.node.path
        ]
        if len(outputs) != 1:
            cdk.Annotations.of(node).add_error(
                f"Expected exactly one endpoint output, found {len(outputs)}"
            )


def add_validation_aspects(
    scope: IConstruct,
    enforce_listener_dependency: bool = True,
    enforce_single_endpoint: bool = True,
) -> None:
    """
    Add validation aspects to a stack or app.

    Args:
        scope: The construct to add aspects to
        enforce_listener_dependency: Check NLB -> ALB listener ordering edges
        enforce_single_endpoint: Check every stack exports one endpoint
    """
    if enforce_listener_dependency:
        cdk.Aspects.of(scope).add(ListenerDependencyAspect())

    if enforce_single_endpoint:
        cdk.Aspects.of(scope).add(SingleEndpointAspect())
