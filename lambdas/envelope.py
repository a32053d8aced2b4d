from typing import Any

SUCCESS_BODY = "Lambda Successfully executed. Check logs for additional info."


def success_response(body: str = SUCCESS_BODY) -> dict[str, Any]:
    # API Gateway only accepts a proxy response in exactly this shape
    return {
        "isBase64Encoded": False,
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": body,
    }
