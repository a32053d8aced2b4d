import json

import pytest
from aws_cdk.assertions import Match, Template
from stack_test_helpers import (
    ResourceCountCase,
    build_template,
    find_resources_by_type,
    get_single_resource_id,
)
from governance_checks import assert_log_group_compliance

from topologies.websocket_api_stack import WebSocketApiStack

ROUTES = ["$connect", "$disconnect", "$default"]


@pytest.fixture
def template() -> Template:
    return build_template(WebSocketApiStack)


# ----------------------------- Resource count smoke test ------------------------

RESOURCES = [
    ResourceCountCase("AWS::ApiGatewayV2::Api", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Route", 3),
    ResourceCountCase("AWS::ApiGatewayV2::Integration", 3),
    ResourceCountCase("AWS::ApiGatewayV2::RouteResponse", 3),
    ResourceCountCase("AWS::ApiGatewayV2::Stage", 1),
    ResourceCountCase("AWS::Lambda::Function", 1),
    ResourceCountCase("AWS::Lambda::Permission", 3),
]


@pytest.mark.parametrize("case", RESOURCES, ids=lambda case: case.resource_type)
def test_resource_count(template: Template, case: ResourceCountCase):
    template.resource_count_is(case.resource_type, case.expected)


def test_websocket_api(template: Template):
    template.has_resource_properties(
        "AWS::ApiGatewayV2::Api",
        {
            "Name": "websocket-api-dev",
            "ProtocolType": "WEBSOCKET",
            "RouteSelectionExpression": "$request.body.action",
        },
    )


@pytest.mark.parametrize("route_key", ROUTES)
def test_route_returns_the_function_response(template: Template, route_key: str):
    template.has_resource_properties(
        "AWS::ApiGatewayV2::Route",
        {"RouteKey": route_key, "RouteResponseSelectionExpression": "$default"},
    )


def test_every_route_response_is_default(template: Template):
    responses = find_resources_by_type(template, "AWS::ApiGatewayV2::RouteResponse")
    assert {
        response["Properties"]["RouteResponseKey"] for response in responses.values()
    } == {"$default"}


def test_all_integrations_invoke_the_one_function(template: Template):
    function_id = get_single_resource_id(
        find_resources_by_type(template, "AWS::Lambda::Function")
    )
    integrations = find_resources_by_type(template, "AWS::ApiGatewayV2::Integration")
    assert len(integrations) == len(ROUTES)
    for integration in integrations.values():
        assert integration["Properties"]["IntegrationType"] == "AWS_PROXY"
        assert function_id in json.dumps(integration["Properties"]["IntegrationUri"])


def test_function_properties(template: Template):
    template.has_resource_properties(
        "AWS::Lambda::Function",
        {
            "FunctionName": "websocket-handler-dev",
            "Handler": "websocket_handler.handler",
            "Runtime": "python3.12",
        },
    )
    assert_log_group_compliance(template)


def test_stage_auto_deploys(template: Template):
    template.has_resource_properties(
        "AWS::ApiGatewayV2::Stage",
        {"StageName": "test", "AutoDeploy": True},
    )


def test_websocket_url_is_the_only_output(template: Template):
    outputs = template.find_outputs("*")
    assert list(outputs) == ["WebSocketUrl"]
    template.has_output(
        "WebSocketUrl",
        {
            "Value": Match.any_value(),
            "Export": {"Name": "websocket-api-url-dev"},
        },
    )
