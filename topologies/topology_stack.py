from typing import Optional

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from common.config import StackConfig
from common.errors import ConfigurationError
from common.stack_context import StackContext
from common.validation import add_validation_aspects


class TopologyStack(Stack):
    """Base of every topology: explicit configuration, zones and one endpoint output."""

    topology: str = ""
    az_count: int = 2

    def __init__(
        self, scope: Construct, construct_id: str, config: StackConfig, **kwargs
    ) -> None:
        # Resolve zones before anything is declared so a missing region fails fast.
        availability_zones = config.availability_zones(self.az_count)
        super().__init__(scope, construct_id, env=config.environment, **kwargs)
        self._availability_zones = availability_zones
        self.config = config
        self.context = StackContext(self, config)
        self.endpoint_output: Optional[CfnOutput] = None
        add_validation_aspects(self)

    # Without this override a concrete env makes the stack look its zones up
    # from context, and Vpc(availability_zones=...) must be a subset of them.
    # https://github.com/aws/aws-cdk/issues/21690
    @property
    def availability_zones(self) -> list[str]:
        return list(self._availability_zones)

    def export_endpoint(
        self,
        output_id: str,
        value: str,
        description: str,
        export_name: Optional[str],
    ) -> CfnOutput:
        """Publish the stack's single endpoint, exported under a scoped name when asked."""
        if self.endpoint_output is not None:
            raise ConfigurationError(
                f"{self.node.id} already publishes {self.endpoint_output.node.id} as its endpoint"
            )
        self.endpoint_output = CfnOutput(
            self,
            output_id,
            description=description,
            value=value,
            export_name=self.context.build_resource_name(export_name) if export_name else None,
        )
        return self.endpoint_output
