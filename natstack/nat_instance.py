# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""
Resources for a NAT instance: the security group it sits in, the instance
itself and the IAM role and instance profile it runs as.

The boot script is the usual fck-nat setup, one command per line with no
leading indentation, ending in a single newline.
"""

from troposphere import Base64, Ref, Select, Sub
from troposphere.ec2 import BlockDeviceMapping, EBSBlockDevice, Instance, \
    NetworkInterfaceProperty, SecurityGroup
from troposphere.iam import InstanceProfile, Role

from .constants import APP_SECURITY_GROUP, INTERNET_GATEWAY_ATTACHMENT, \
    NAT_INSTANCE_NAME, NAT_SECURITY_GROUP, PUBLIC_SUBNET, STACK_NAME, VPC
from .utils import allow, assume_role_policy, nametag, policy, sgcidr, \
    sgsource

MANAGED_POLICY_ARNS = [
    # SSM session access in place of ssh
    'arn:aws:iam::aws:policy/AmazonSSMManagedInstanceCore',
    'arn:aws:iam::aws:policy/CloudWatchAgentServerPolicy',
]

AGENT_RPM_URL = ('https://s3.amazonaws.com/ec2-downloads-windows/SSMAgent/'
                 'latest/linux_arm64/amazon-ssm-agent.rpm')

USER_DATA = '\n'.join([
    '#!/bin/bash -xe',
    'yum update -y',
    'yum install -y %s' % AGENT_RPM_URL,
    'systemctl enable fck-nat.service',
    'systemctl restart fck-nat.service',
    '',
])


def as_mapping(resources):
    return {r.title: r.to_dict() for r in resources}


def nat_nametag():
    return nametag(Sub('%s-nat' % STACK_NAME))


def nat_security_group():
    return SecurityGroup(
        NAT_SECURITY_GROUP,
        GroupDescription='NAT Instance',
        VpcId=Ref(VPC),
        SecurityGroupEgress=[
            sgcidr('0.0.0.0/0', 'tcp', 80,
                   description='permit outbound HTTP to the Internet'),
            sgcidr('0.0.0.0/0', 'tcp', 443,
                   description='permit outbound HTTPS to the Internet'),
            sgcidr('0.0.0.0/0', 'tcp', 3306,
                   description='permit outbound DB access to the Internet'),
        ],
        SecurityGroupIngress=[
            sgsource(APP_SECURITY_GROUP, 'tcp', 80,
                     description='permit inbound HTTP from %s' %
                     APP_SECURITY_GROUP),
            sgsource(APP_SECURITY_GROUP, 'tcp', 443,
                     description='permit inbound HTTPS from %s' %
                     APP_SECURITY_GROUP),
            sgcidr('0.0.0.0/0', 'tcp', 3306,
                   description='permit inbound DB access from the Internet'),
        ],
        Tags=[nat_nametag()],
    )


def nat_instance_resources(image_id, instance_type, zones, *,
                           name=NAT_INSTANCE_NAME,
                           public_subnet=PUBLIC_SUBNET):
    """
    Return the instance, role and instance profile as troposphere objects
    titled `name`, `<name>Role` and `<name>InstanceProfile`, or an empty
    list when `image_id` is empty or `zones` is not a non-empty list.
    """
    if not image_id:
        return []
    if not isinstance(zones, (list, tuple)) or len(zones) < 1:
        return []
    # troposphere rejects non-alphanumeric titles but accepts an empty one
    if not name or not isinstance(name, str):
        raise ValueError("invalid NAT instance name %r" % (name,))

    role_name = '%sRole' % name
    profile_name = '%sInstanceProfile' % name

    instance = Instance(
        name,
        DependsOn=INTERNET_GATEWAY_ATTACHMENT,
        AvailabilityZone=Select('0', list(zones)),
        BlockDeviceMappings=[
            BlockDeviceMapping(
                DeviceName='/dev/xvda',
                Ebs=EBSBlockDevice(
                    VolumeSize=10,
                    VolumeType='gp3',
                    DeleteOnTermination=True,
                ),
            ),
        ],
        IamInstanceProfile=Ref(profile_name),
        ImageId=image_id,
        InstanceType=instance_type,
        Monitoring=False,
        NetworkInterfaces=[
            NetworkInterfaceProperty(
                AssociatePublicIpAddress=True,
                DeleteOnTermination=True,
                Description='eth0',
                DeviceIndex='0',
                GroupSet=[Ref(NAT_SECURITY_GROUP)],
                SubnetId=Ref('%sSubnet1' % public_subnet),
            ),
        ],
        # NAT forwards traffic that isn't addressed to the instance itself
        SourceDestCheck=False,
        Tags=[nat_nametag()],
        UserData=Base64(Sub(USER_DATA)),
    )

    role = Role(
        role_name,
        AssumeRolePolicyDocument=assume_role_policy('ec2.amazonaws.com'),
        ManagedPolicyArns=list(MANAGED_POLICY_ARNS),
        Policies=[
            policy('NATSSMPolicy', allow('ssm:GetParameter')),
            # keep the static IP across instance replacement
            policy('NATEIPolicy',
                   allow('ec2:AssociateAddress', 'ec2:DisassociateAddress')),
            # HA mode moves the ENI between instances
            policy('NATNetworkInterfacePolicy',
                   allow('ec2:AttachNetworkInterface',
                         'ec2:DetachNetworkInterface')),
        ],
    )

    profile = InstanceProfile(
        profile_name,
        Roles=[Ref(role_name)],
    )

    return [instance, role, profile]


def build_nat_security_group():
    """Build the security group the NAT instance sits in"""
    return as_mapping([nat_security_group()])


def build_nat_instance(image_id, instance_type, zones, *,
                       name=NAT_INSTANCE_NAME, public_subnet=PUBLIC_SUBNET):
    """
    Build the NAT instance along with the IAM role and instance profile it
    runs as, keyed `name`, `<name>Role` and `<name>InstanceProfile`.

    An empty `image_id` or an empty (or non-list) `zones` yields an empty
    dict rather than an error, so callers must check the result before
    merging it into a template.  The instance is always placed in the first
    of `zones`.
    """
    return as_mapping(nat_instance_resources(
        image_id, instance_type, zones,
        name=name, public_subnet=public_subnet))
