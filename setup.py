# setup.py
"""Setup script for Lumina Workflows."""

from setuptools import setup, find_packages

setup(
    name="lumina-workflows",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "click>=8.0",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "structlog>=23.1",
        "httpx>=0.24",
        "jinja2>=3.1",
        "fastapi>=0.100",
        "uvicorn>=0.22",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "black>=23.0",
            "flake8>=6.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "lumina=cli.main:cli",
        ],
    },
    python_requires=">=3.8",
)
