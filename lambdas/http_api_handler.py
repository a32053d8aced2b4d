import os
from typing import Any

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext

from envelope import success_response

logger = Logger(
    service="http-api-handler", level=os.getenv("LOG_LEVEL", "INFO").upper()
)


@logger.inject_lambda_context
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    logger.info(
        "HTTP API request received",
        extra={
            "route_key": event.get("routeKey"),
            "raw_path": event.get("rawPath"),
        },
    )
    return success_response()
