from constructs import Construct

from common.config import StackConfig
from compute.functions import build_function
from exposure.api_gateway import build_websocket_api
from topologies.topology_stack import TopologyStack


class WebSocketApiStack(TopologyStack):
    """WebSocket API whose connect, disconnect and default routes all reach one function."""

    topology = "websocket-api"

    def __init__(
        self, scope: Construct, construct_id: str, config: StackConfig, **kwargs
    ) -> None:
        super().__init__(scope, construct_id, config, **kwargs)

        self.handler = build_function(
            self.context,
            name="websocket-handler",
            handler="websocket_handler.handler",
            description="Lambda triggered by API Gateway WebSocket routes",
        )
        self.stage = build_websocket_api(self.context, self.handler)

        self.export_endpoint(
            "WebSocketUrl",
            value=self.stage.url,
            description="The WebSocket URL of the stage",
            export_name="websocket-api-url",
        )
