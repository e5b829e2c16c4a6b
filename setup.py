#!/usr/bin/env python3
"""
Legacy setup.py for tools that still invoke it directly.
Packaging metadata for the Node Group Drain Tool lives in pyproject.toml.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
