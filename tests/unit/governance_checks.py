from stack_test_helpers import find_resources_by_type, ingress_resources_for
from governance_test_helpers import AWSService, resource_governance_doc_url

ANY_IPV4 = "0.0.0.0/0"


def assert_internal_tier_compliance(template, group_id):
    """An internal tier only admits traffic from another security group."""
    governance_doc = resource_governance_doc_url(AWSService.Security_Group.value)
    group = template.to_json()["Resources"][group_id]
    assert "SecurityGroupIngress" not in group["Properties"], (
        "Internal tiers must not carry inline CIDR ingress rules "
        f"according to network security standards. see {governance_doc}"
    )
    rules = ingress_resources_for(template, group_id)
    assert rules, f"Internal tier {group_id} admits no traffic at all. see {governance_doc}"
    for rule in rules.values():
        props = rule["Properties"]
        assert props.get("CidrIp") != ANY_IPV4 and "SourceSecurityGroupId" in props, (
            f"Internal tier {group_id} must only admit its upstream security group. "
            f"see {governance_doc}"
        )


def assert_log_group_compliance(template):
    governance_doc = resource_governance_doc_url(AWSService.Log_Group.value)
    log_groups = find_resources_by_type(template, "AWS::Logs::LogGroup")
    assert log_groups
    for logical_id, log_group in log_groups.items():
        assert "RetentionInDays" in log_group["Properties"], (
            f"{logical_id} must have a bounded retention. see {governance_doc}"
        )
        assert log_group["DeletionPolicy"] == "Delete", (
            f"{logical_id} must be destroyed with its stack. see {governance_doc}"
        )
