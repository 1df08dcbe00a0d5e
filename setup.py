#!/usr/bin/env python3
"""
Signal Gateway - Setup Configuration
Setup script for the trading signal gateway package.
"""

import os
from setuptools import setup, find_packages

setup(
    name="signal-gateway",
    version="1.0.0",
    description="Smart money signal proxy with per-pair API key rotation and request throttling",
    long_description=open("README.md", "r").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",

    # Package structure
    packages=find_packages(include=['signal_gateway', 'signal_gateway.*']),
    python_requires=">=3.9",

    # Dependencies
    install_requires=[
        # Core dependencies
        "fastapi>=0.104.0",
        "uvicorn[standard]>=0.24.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",

        # Data processing
        "pandas>=2.1.4",
        "numpy>=1.25.2",

        # HTTP clients
        "aiohttp>=3.9.1",
        "httpx>=0.25.2",
    ],

    # Optional dependencies
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "pytest-asyncio>=0.21.1",
            "pytest-cov>=4.1.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.7.0",
        ],
    },

    # Entry points
    entry_points={
        "console_scripts": [
            "signal-gateway=signal_gateway.main:run",
        ],
    },

    # Metadata
    author="Signal Gateway Team",
    license="MIT",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial :: Investment",
    ],
)
