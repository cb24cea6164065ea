# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

from setuptools import setup

setup(
    name='natstack',
    version='1.0.0',
    description='CloudFormation resources for a NAT instance',
    install_requires=[
        'PyYAML',
        'troposphere',
    ],
    extras_require={
        'test': [
            'flake8',
            'mock',
            'pytest',
            'pytest-cov',
        ],
    },
    packages=[
        'natstack',
        'natstack.tests',
    ],
    license='MPL2',
)
