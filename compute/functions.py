from aws_cdk import Duration, aws_lambda as _lambda, aws_logs as logs

from common import constants
from common.stack_context import StackContext


def build_function(
    context: StackContext,
    name: str,
    handler: str,
    description: str,
    timeout: Duration = Duration.seconds(3),
    memory_size: int = 128,
    log_retention: logs.RetentionDays = constants.DEFAULT_LOG_RETENTION,
) -> _lambda.Function:
    """Define a Python function from the `lambdas` asset with the Powertools layer."""
    stack = context.stack
    function_name = context.build_resource_name(name)
    log_group = context.build_log_group(
        f"/aws/lambda/{function_name}",
        construct_id=context.build_resource_id(f"{name}-log-group"),
        retention=log_retention,
    )
    layers = [
        _lambda.LayerVersion.from_layer_version_arn(
            stack,
            context.build_resource_id(f"{name}-power-tools-layer"),
            layer_version_arn=context.build_power_tools_layer_arn(),
        ),
    ]
    return _lambda.Function(
        stack,
        context.build_resource_id(f"{name}-function"),
        function_name=function_name,
        runtime=constants.PYTHON_RUNTIME,
        handler=handler,
        code=_lambda.Code.from_asset(
            constants.LAMBDA_CODE_SRC, exclude=["__pycache__", "*.pyc"]
        ),
        architecture=constants.DEFAULT_ARCHITECTURE,
        description=description,
        timeout=timeout,
        memory_size=memory_size,
        log_group=log_group,
        layers=layers,
        retry_attempts=0,
        environment={
            "LOG_LEVEL": "INFO",
            "POWERTOOLS_SERVICE_NAME": name,
        },
    )
