from constructs import Construct

from common.config import StackConfig
from compute.functions import build_function
from exposure.api_gateway import build_http_api_lambda_integration
from topologies.topology_stack import TopologyStack


class HttpApiLambdaStack(TopologyStack):
    """HTTP API routing `GET /lambda` to a Lambda function."""

    topology = "http-api-lambda"

    def __init__(
        self, scope: Construct, construct_id: str, config: StackConfig, **kwargs
    ) -> None:
        super().__init__(scope, construct_id, config, **kwargs)

        self.handler = build_function(
            self.context,
            name="http-api-handler",
            handler="http_api_handler.handler",
            description="Lambda triggered by an HTTP API route",
        )
        self.http_api = build_http_api_lambda_integration(self.context, self.handler)

        self.export_endpoint(
            "ApiEndpoint",
            value=self.http_api.api_endpoint,
            description="API Endpoint",
            export_name="lambda-api-endpoint",
        )
