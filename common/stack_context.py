from attrs import define, field
from aws_cdk import RemovalPolicy, Stack, aws_logs as logs
from typing import Optional

import common.constants as constants
from common.config import StackConfig
from common.errors import ConfigurationError


@define(slots=True, frozen=True)
class StackContext:
    stack: Stack
    config: StackConfig = field(
        metadata={"description": "Scope tag, account and region of the deployment"},
    )

    @property
    def scope(self) -> str:
        return self.config.scope

    @property
    def aws_region(self) -> Optional[str]:
        return self.config.region

    # ---------- layers ----------
    def build_power_tools_layer_arn(self) -> str:
        region = self.aws_region
        if not region:
            raise ConfigurationError(
                "AWS region is not set, unable to resolve Power Tools Layer ARN"
            )
        return constants.POWER_TOOLS_LAYER.format(
            region=region,
            runtime=constants.POWER_TOOLS_PYTHON_RUNTIME,
            version=constants.POWER_TOOLS_VERSION,
            lambda_layer_account=constants.POWER_TOOLS_LAMBDA_LAYER_ACCOUNT,
            power_tools_type=constants.POWER_TOOLS_LAMBDA_LAYER_NAME,
            architecture=constants.POWER_TOOLS_ARCHITECTURE,
        )

    # ---------- naming ----------
    def build_resource_name(
        self, resource_type: str, action: Optional[str] = None
    ) -> str:
        """Build the physical name of a resource, always suffixed with the scope.

        Examples:
            - Without action: nlb-ec2-instance-dev
            - With action: web-server-1-instance-dev
        """
        if action:
            return f"{action}-{resource_type}-{self.scope}".lower()
        return f"{resource_type}-{self.scope}".lower()

    def build_resource_id(self, resource_type: str, action: Optional[str] = None) -> str:
        """Build the construct ID of a resource.

        Construct IDs do not carry the scope: the stack name already does.

        Examples:
            - Without action: AlbSecurityGroup (from "alb-security-group")
            - With action: WebServer1Instance
        """
        words = resource_type.split("-")
        if action:
            words = action.split("-") + words
        return "".join(word.capitalize() for word in words)

    def build_log_group(
        self,
        log_group_name: str,
        construct_id: str = "LogGroup",
        retention: logs.RetentionDays = constants.DEFAULT_LOG_RETENTION,
    ) -> logs.LogGroup:
        return logs.LogGroup(
            self.stack,
            construct_id,
            log_group_name=log_group_name,
            removal_policy=RemovalPolicy.DESTROY,
            retention=retention,
        )
