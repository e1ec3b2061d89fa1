#!/usr/bin/env python
"""
Staff Analytics Leaderboards Setup
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="staff-analytics",
    version="1.0.0",
    description="Per-employee leaderboards and reports from paginated analytics rows",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["staff_analytics", "staff_analytics.*"]),
    py_modules=["run_server"],
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            # fastapi.testclient
            "httpx>=0.25.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "staff-analytics-api=run_server:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: Log Analysis",
    ],
    keywords=["analytics", "leaderboard", "ga4", "fastapi", "polars"],
    zip_safe=False,
)
