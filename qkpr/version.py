#!/usr/bin/env python3

PACKAGE_NAME = "qkpr"
__version__ = "0.4.0"
