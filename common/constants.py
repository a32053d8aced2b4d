from pathlib import Path

from aws_cdk import aws_ec2 as ec2, aws_lambda as _lambda, aws_logs as logs

POWER_TOOLS_PYTHON_RUNTIME = "python312"
POWER_TOOLS_LAMBDA_LAYER_NAME = "AWSLambdaPowertoolsPythonV3"
POWER_TOOLS_LAMBDA_LAYER_ACCOUNT = "017000801446"
POWER_TOOLS_VERSION = "18"
POWER_TOOLS_ARCHITECTURE = "x86_64"
POWER_TOOLS_LAYER = "arn:aws:lambda:{region}:{lambda_layer_account}:layer:{power_tools_type}-{runtime}-{architecture}:{version}"

PYTHON_RUNTIME = _lambda.Runtime.PYTHON_3_12
DEFAULT_ARCHITECTURE = _lambda.Architecture.X86_64

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LAMBDA_CODE_SRC = str(PROJECT_ROOT / "lambdas")
USER_DATA_DIR = PROJECT_ROOT / "user_data"
WEB_SERVER_USER_DATA = "web_server"

# Naming
SCOPE_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9-]*$"
# Load balancer and target group names are capped at 32 characters
SCOPE_MAX_LENGTH = 15
DEFAULT_TOPOLOGY = "all"

# Network
VPC_CIDR = ec2.Vpc.DEFAULT_CIDR_RANGE
PUBLIC_ONLY_CIDR_MASK = 16
AZ_SUFFIXES = ("a", "b")
ANY_IPV4_CIDR = "0.0.0.0/0"

# Compute
WEB_INSTANCE_COUNT = 2
WEB_INSTANCE_CLASS = ec2.InstanceClass.T2
WEB_INSTANCE_SIZE = ec2.InstanceSize.MICRO
HTTP_PORT = 80
CONTAINER_PORT = 8080
FARGATE_CPU = 256
FARGATE_MEMORY_MIB = 512
DEFAULT_IMAGE_TAG = "latest"
HEALTHY_THRESHOLD_COUNT = 2

# Logs
DEFAULT_LOG_RETENTION = logs.RetentionDays.ONE_DAY

# API Gateway
ALB_ROUTE_PATH = "/alb"
ALB_PATH_OVERWRITE = "/"
LAMBDA_ROUTE_PATH = "/lambda"
WEBSOCKET_STAGE_NAME = "test"
