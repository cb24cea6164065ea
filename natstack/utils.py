# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

from troposphere import Ref
from troposphere.ec2 import SecurityGroupRule
from troposphere.iam import Policy

POLICY_VERSION = '2012-10-17'


def nametag(name):
    return {'Key': 'Name', 'Value': name}


def _rule(proto, from_port, to_port, description, **source):
    if to_port is None:
        to_port = from_port
    if description:
        source['Description'] = description
    return SecurityGroupRule(
        IpProtocol=proto,
        FromPort=from_port,
        ToPort=to_port,
        **source
    )


def sgcidr(cidr, proto, from_port, to_port=None, description=None):
    return _rule(proto, from_port, to_port, description, CidrIp=cidr)


def sgsource(group, proto, from_port, to_port=None, description=None):
    return _rule(proto, from_port, to_port, description,
                 SourceSecurityGroupId=Ref(group))


def allow(*actions, resource="*"):
    return {
        "Effect": "Allow",
        "Action": list(actions),
        "Resource": resource,
    }


def policy(name, *statements):
    return Policy(
        PolicyName=name,
        PolicyDocument={
            "Version": POLICY_VERSION,
            "Statement": list(statements),
        },
    )


def assume_role_policy(service):
    """Trust policy letting only `service` assume the role"""
    return {
        "Version": POLICY_VERSION,
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": service},
                "Action": "sts:AssumeRole",
            },
        ],
    }
