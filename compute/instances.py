from aws_cdk import aws_ec2 as ec2

from common import constants
from common.stack_context import StackContext
from networking.vpc import NetworkLayout


def get_user_data(filename: str) -> str:
    with open(constants.USER_DATA_DIR / filename) as file:
        user_data = file.read()
    return user_data


def build_web_instances(
    context: StackContext,
    vpc: ec2.IVpc,
    layout: NetworkLayout,
    security_group: ec2.ISecurityGroup,
    count: int = constants.WEB_INSTANCE_COUNT,
) -> list[ec2.Instance]:
    """Declare identical web servers, each serving a page naming its host."""
    user_data = ec2.UserData.custom(get_user_data(constants.WEB_SERVER_USER_DATA))
    machine_image = ec2.MachineImage.latest_amazon_linux2023()

    instances = []
    for index in range(1, count + 1):
        action = f"web-server-{index}"
        instances.append(
            ec2.Instance(
                context.stack,
                context.build_resource_id("instance", action=action),
                instance_name=context.build_resource_name("instance", action=action),
                vpc=vpc,
                vpc_subnets=layout.compute_subnets,
                security_group=security_group,
                instance_type=ec2.InstanceType.of(
                    constants.WEB_INSTANCE_CLASS, constants.WEB_INSTANCE_SIZE
                ),
                machine_image=machine_image,
                user_data=user_data,
            )
        )
    return instances
