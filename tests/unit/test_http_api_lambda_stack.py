import pytest
from aws_cdk.assertions import Match, Template
from stack_test_helpers import (
    LogGroupTestCase,
    ResourceCountCase,
    build_template,
    find_resources_by_type,
    get_single_resource_id,
)
from governance_checks import assert_log_group_compliance

from topologies.http_api_lambda_stack import HttpApiLambdaStack

POWER_TOOLS_LAYER_ARN = (
    "arn:aws:lambda:us-east-1:017000801446:layer:"
    "AWSLambdaPowertoolsPythonV3-python312-x86_64:18"
)


@pytest.fixture
def template() -> Template:
    return build_template(HttpApiLambdaStack)


# ----------------------------- Resource count smoke test ------------------------

RESOURCES = [
    ResourceCountCase("AWS::ApiGatewayV2::Api", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Route", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Integration", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Stage", 1),
    ResourceCountCase("AWS::Lambda::Function", 1),
    ResourceCountCase("AWS::Lambda::Permission", 1),
    ResourceCountCase("AWS::Logs::LogGroup", 1),
    ResourceCountCase("AWS::EC2::VPC", 0),
]


@pytest.mark.parametrize("case", RESOURCES, ids=lambda case: case.resource_type)
def test_resource_count(template: Template, case: ResourceCountCase):
    template.resource_count_is(case.resource_type, case.expected)


# ------------------- API -------------------


def test_http_api(template: Template):
    template.has_resource_properties(
        "AWS::ApiGatewayV2::Api",
        {"Name": "lambda-http-api-dev", "ProtocolType": "HTTP"},
    )


def test_route_proxies_to_the_function(template: Template):
    function_id = get_single_resource_id(
        find_resources_by_type(template, "AWS::Lambda::Function")
    )
    template.has_resource_properties("AWS::ApiGatewayV2::Route", {"RouteKey": "GET /lambda"})
    template.has_resource_properties(
        "AWS::ApiGatewayV2::Integration",
        {
            "IntegrationType": "AWS_PROXY",
            "IntegrationUri": {"Fn::GetAtt": [function_id, "Arn"]},
            "PayloadFormatVersion": "2.0",
        },
    )


# ------------------- Function -------------------


def test_function_properties(template: Template):
    template.has_resource_properties(
        "AWS::Lambda::Function",
        {
            "FunctionName": "http-api-handler-dev",
            "Handler": "http_api_handler.handler",
            "Runtime": "python3.12",
            "Timeout": 3,
            "MemorySize": 128,
            "Layers": [POWER_TOOLS_LAYER_ARN],
            "Environment": {
                "Variables": {
                    "LOG_LEVEL": "INFO",
                    "POWERTOOLS_SERVICE_NAME": "http-api-handler",
                }
            },
        },
    )


def test_function_is_not_retried(template: Template):
    template.has_resource_properties(
        "AWS::Lambda::EventInvokeConfig", {"MaximumRetryAttempts": 0}
    )


LOG_GROUPS = [
    LogGroupTestCase(
        id="HttpApiHandlerLogGroup",
        log_group_name="/aws/lambda/http-api-handler-dev",
        retention_days=1,
    ),
]


@pytest.mark.parametrize("case", LOG_GROUPS, ids=lambda case: case.id)
def test_log_group(template: Template, case: LogGroupTestCase):
    template.has_resource(
        "AWS::Logs::LogGroup",
        {
            "Properties": {
                "LogGroupName": case.log_group_name,
                "RetentionInDays": case.retention_days,
            },
            "DeletionPolicy": "Delete",
        },
    )
    assert_log_group_compliance(template)


def test_function_logs_to_its_log_group(template: Template):
    log_group_id = get_single_resource_id(
        find_resources_by_type(template, "AWS::Logs::LogGroup")
    )
    template.has_resource_properties(
        "AWS::Lambda::Function",
        {"LoggingConfig": {"LogGroup": {"Ref": log_group_id}}},
    )


def test_api_endpoint_is_exported(template: Template):
    template.has_output(
        "ApiEndpoint",
        {
            "Value": Match.any_value(),
            "Export": {"Name": "lambda-api-endpoint-dev"},
        },
    )
