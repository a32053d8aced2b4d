import pytest
from aws_cdk.assertions import Match, Template
from stack_test_helpers import (
    ResourceCountCase,
    build_template,
    get_security_group_id,
    ingress_resources_for,
)
from governance_checks import assert_internal_tier_compliance

from topologies.http_api_alb_stack import HttpApiAlbStack


@pytest.fixture
def template() -> Template:
    return build_template(HttpApiAlbStack)


# ----------------------------- Resource count smoke test ------------------------

RESOURCES = [
    ResourceCountCase("AWS::EC2::VPC", 1),
    ResourceCountCase("AWS::EC2::SecurityGroup", 3),
    ResourceCountCase("AWS::EC2::Instance", 2),
    ResourceCountCase("AWS::ElasticLoadBalancingV2::LoadBalancer", 1),
    ResourceCountCase("AWS::ElasticLoadBalancingV2::Listener", 1),
    ResourceCountCase("AWS::ApiGatewayV2::VpcLink", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Api", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Integration", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Route", 1),
    ResourceCountCase("AWS::ApiGatewayV2::Stage", 1),
]


@pytest.mark.parametrize("case", RESOURCES, ids=lambda case: case.resource_type)
def test_resource_count(template: Template, case: ResourceCountCase):
    template.resource_count_is(case.resource_type, case.expected)


# ------------------- Security group chain -------------------

CHAIN = [
    ("alb-security-group-dev", "vpc-link-security-group-dev"),
    ("ec2-instance-security-group-dev", "alb-security-group-dev"),
]


@pytest.mark.parametrize("group_name,upstream_name", CHAIN)
def test_each_internal_tier_only_admits_its_upstream(
    template: Template, group_name: str, upstream_name: str
):
    group = get_security_group_id(template, group_name)
    upstream = get_security_group_id(template, upstream_name)

    rules = ingress_resources_for(template, group)
    assert [rule["Properties"]["SourceSecurityGroupId"] for rule in rules.values()] == [
        {"Fn::GetAtt": [upstream, "GroupId"]}
    ]
    assert all(rule["Properties"]["FromPort"] == 80 for rule in rules.values())
    assert_internal_tier_compliance(template, group)


def test_vpc_link_group_is_open(template: Template):
    template.has_resource_properties(
        "AWS::EC2::SecurityGroup",
        {
            "GroupName": "vpc-link-security-group-dev",
            "SecurityGroupIngress": [
                Match.object_like({"CidrIp": "0.0.0.0/0", "FromPort": 0, "ToPort": 65535})
            ],
        },
    )


# ------------------- Exposure chain -------------------


def test_alb_is_internal(template: Template):
    template.has_resource_properties(
        "AWS::ElasticLoadBalancingV2::LoadBalancer",
        {"Name": "http-api-alb-alb-dev", "Scheme": "internal"},
    )


def test_vpc_link_properties(template: Template):
    vpc_link_group = get_security_group_id(template, "vpc-link-security-group-dev")
    template.has_resource_properties(
        "AWS::ApiGatewayV2::VpcLink",
        {
            "Name": "api-gateway-to-alb-dev",
            "SecurityGroupIds": [{"Fn::GetAtt": [vpc_link_group, "GroupId"]}],
        },
    )


def test_integration_rewrites_alb_path_through_vpc_link(template: Template):
    template.has_resource_properties(
        "AWS::ApiGatewayV2::Integration",
        {
            "IntegrationType": "HTTP_PROXY",
            "ConnectionType": "VPC_LINK",
            "ConnectionId": {"Ref": Match.string_like_regexp("VpcLink")},
            "IntegrationUri": {"Ref": Match.string_like_regexp("HttpListener")},
            "RequestParameters": {"overwrite:path": "/"},
        },
    )


def test_api_properties(template: Template):
    template.has_resource_properties(
        "AWS::ApiGatewayV2::Api",
        {
            "Name": "alb-http-api-dev",
            "Description": "HTTP API with ALB Integration",
            "ProtocolType": "HTTP",
        },
    )
    template.has_resource_properties("AWS::ApiGatewayV2::Route", {"RouteKey": "GET /alb"})


def test_api_endpoint_is_the_only_output(template: Template):
    outputs = template.find_outputs("*")
    assert list(outputs) == ["ApiEndpoint"]
    assert outputs["ApiEndpoint"]["Export"] == {"Name": "api-gateway-endpoint-dev"}
