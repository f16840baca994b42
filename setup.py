# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the Pub Package Registry
"""

from setuptools import setup, find_packages

setup(
    name="pub-registry",
    version="1.0.0",
    description="Private pub v2 package repository with token-scoped publishing",
    author="Jason Cafarelli",
    packages=find_packages(include=["pub_registry", "pub_registry.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
        "aiofiles>=23.1.0",
        "python-multipart>=0.0.9",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.25.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "pub-registry=pub_registry.cli:main",
        ]
    },
)
