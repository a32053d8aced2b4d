from aws_cdk import (
    aws_apigatewayv2 as apigwv2,
    aws_apigatewayv2_integrations as apigwv2_integrations,
    aws_ec2 as ec2,
    aws_elasticloadbalancingv2 as elbv2,
    aws_lambda as _lambda,
)

from common import constants
from common.stack_context import StackContext


def build_http_api_alb_integration(
    context: StackContext,
    vpc: ec2.IVpc,
    vpc_link_security_group: ec2.ISecurityGroup,
    listener: elbv2.IApplicationListener,
) -> apigwv2.HttpApi:
    """HTTP API reaching a private ALB through a VPC Link.

    `<api endpoint>/alb` arrives at the ALB as `/` because of the path overwrite.
    """
    vpc_link = apigwv2.VpcLink(
        context.stack,
        "VpcLink",
        vpc=vpc,
        vpc_link_name=context.build_resource_name("api-gateway-to-alb"),
        security_groups=[vpc_link_security_group],
    )

    parameter_mapping = apigwv2.ParameterMapping().overwrite_path(
        apigwv2.MappingValue.custom(constants.ALB_PATH_OVERWRITE)
    )
    integration = apigwv2_integrations.HttpAlbIntegration(
        "AlbIntegration",
        listener,
        vpc_link=vpc_link,
        parameter_mapping=parameter_mapping,
    )

    http_api = apigwv2.HttpApi(
        context.stack,
        "HttpApi",
        api_name=context.build_resource_name("alb-http-api"),
        description="HTTP API with ALB Integration",
    )
    http_api.add_routes(
        path=constants.ALB_ROUTE_PATH,
        methods=[apigwv2.HttpMethod.GET],
        integration=integration,
    )
    return http_api


def build_http_api_lambda_integration(
    context: StackContext, handler: _lambda.IFunction
) -> apigwv2.HttpApi:
    """HTTP API proxying a route to a Lambda function."""
    http_api = apigwv2.HttpApi(
        context.stack,
        "HttpApi",
        api_name=context.build_resource_name("lambda-http-api"),
        description="HTTP API with Lambda Integration",
        create_default_stage=True,
    )
    integration = apigwv2_integrations.HttpLambdaIntegration(
        "LambdaIntegration",
        handler=handler,
    )
    http_api.add_routes(
        path=constants.LAMBDA_ROUTE_PATH,
        methods=[apigwv2.HttpMethod.GET],
        integration=integration,
    )
    return http_api


def build_websocket_api(
    context: StackContext, handler: _lambda.IFunction
) -> apigwv2.WebSocketStage:
    """WebSocket API with connect, disconnect and default routes on one function.

    Each route gets its own integration object: an integration grants Lambda
    invoke permission only for the first route it is bound to.
    """

    def route_options(route: str) -> apigwv2.WebSocketRouteOptions:
        return apigwv2.WebSocketRouteOptions(
            integration=apigwv2_integrations.WebSocketLambdaIntegration(
                f"{route.capitalize()}Integration", handler
            ),
            return_response=True,
        )

    api = apigwv2.WebSocketApi(
        context.stack,
        "WebSocketApi",
        api_name=context.build_resource_name("websocket-api"),
        description="WebSocket API with Lambda Integration",
        connect_route_options=route_options("connect"),
        disconnect_route_options=route_options("disconnect"),
        default_route_options=route_options("default"),
    )
    return apigwv2.WebSocketStage(
        context.stack,
        "WebSocketStage",
        web_socket_api=api,
        stage_name=constants.WEBSOCKET_STAGE_NAME,
        auto_deploy=True,
    )
