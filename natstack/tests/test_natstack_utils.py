from natstack.utils import allow, assume_role_policy, nametag, policy, \
    sgcidr, sgsource


def test_nametag():
    assert nametag("nat") == {"Key": "Name", "Value": "nat"}


def test_sgcidr_defaults_to_port():
    assert sgcidr("10.0.0.0/8", "udp", 53).to_dict() == {
        "IpProtocol": "udp",
        "FromPort": 53,
        "ToPort": 53,
        "CidrIp": "10.0.0.0/8",
    }


def test_sgsource_port_range():
    rule = sgsource("AppSecurityGroup", "tcp", 8000, 8080,
                    description="app ports").to_dict()
    assert rule == {
        "Description": "app ports",
        "IpProtocol": "tcp",
        "FromPort": 8000,
        "ToPort": 8080,
        "SourceSecurityGroupId": {"Ref": "AppSecurityGroup"},
    }


def test_policy():
    p = policy("P", allow("s3:GetObject", resource="arn:aws:s3:::b/*"))
    assert p.to_dict() == {
        "PolicyName": "P",
        "PolicyDocument": {
            "Version": "2012-10-17",
            "Statement": [{
                "Effect": "Allow",
                "Action": ["s3:GetObject"],
                "Resource": "arn:aws:s3:::b/*",
            }],
        },
    }


def test_assume_role_policy_single_statement():
    statement, = assume_role_policy("lambda.amazonaws.com")["Statement"]
    assert statement["Principal"] == {"Service": "lambda.amazonaws.com"}
