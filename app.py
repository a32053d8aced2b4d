#!/usr/bin/env python3
"""AWS CDK entrypoint for the network topology stacks.

Every stack is parameterized by CDK context: ``scope`` (required, embedded in
every resource name), ``account`` and ``region`` (default to the CDK CLI
environment), ``topology`` (comma-separated keys or ``all``) and the
topology-specific ``ecrArn``, ``imageTag``, ``ingressPolicy`` and
``exportEndpoint``.
"""
import logging
import os

import aws_cdk as cdk

from topologies.registry import build_topologies

logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())

app = cdk.App()

build_topologies(app)

app.synth()
