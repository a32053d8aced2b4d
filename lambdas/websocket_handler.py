import os
from typing import Any

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext

from envelope import success_response

logger = Logger(
    service="websocket-handler", level=os.getenv("LOG_LEVEL", "INFO").upper()
)


@logger.inject_lambda_context
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    request_context = event.get("requestContext", {})
    logger.info(
        "WebSocket event received",
        extra={
            "route_key": request_context.get("routeKey"),
            "event_type": request_context.get("eventType"),
            "connection_id": request_context.get("connectionId"),
        },
    )
    logger.debug(event)
    return success_response()
