# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

# Logical id prefix of the public subnets in the network template; the
# subnets themselves are named PublicSubnet1, PublicSubnet2, ...
PUBLIC_SUBNET = 'Public'

NAT_INSTANCE_NAME = 'NatInstance'
NAT_SECURITY_GROUP = 'NatSecurityGroup'

# resources defined by the surrounding templates
VPC = 'VPC'
APP_SECURITY_GROUP = 'AppSecurityGroup'
INTERNET_GATEWAY_ATTACHMENT = 'InternetGatewayAttachment'

# resolved by CloudFormation at deploy time
STACK_NAME = '${AWS::StackName}'
