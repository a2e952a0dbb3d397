"""
Setup script for the Initiate voice assistant backend.
"""
from setuptools import setup, find_packages

setup(
    name="initiate",
    version="0.1.0",
    description="Voice-driven blockchain assistant backend with LLM tool calling",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "httpx>=0.27.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "web3>=7.0.0",
        "eth-account>=0.13.0",
        "eth-utils>=5.2.0",
        "click>=8.0.0",
        "rich>=10.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "initiate=initiate.cli:main",
        ],
    },
)
