"""
EarlySpring Core - Wake-up alarm engine.

Alarm scheduling, ringing and wake-up lifecycle for the EarlySpring alarm
clock, with pluggable platform ports.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

# Read version from __version__.py
version = {}
with open(this_directory / "earlyspring_core" / "__version__.py") as fp:
    exec(fp.read(), version)

setup(
    name="earlyspring-core",
    version=version["__version__"],
    author="EarlySpring Team",
    author_email="team@earlyspring.app",
    description="Alarm scheduling and wake-up lifecycle engine for the EarlySpring alarm clock",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/earlyspring/earlyspring-core",
    project_urls={
        "Bug Tracker": "https://github.com/earlyspring/earlyspring-core/issues",
        "Source Code": "https://github.com/earlyspring/earlyspring-core",
    },
    packages=find_packages(exclude=["tests", "tests.*", "examples", "docs"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Framework :: AsyncIO",
        "Typing :: Typed",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pydantic>=2.0.0,<3.0.0",
        "python-dotenv>=1.0.0",
        "structlog>=24.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
            "pre-commit>=3.0.0",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords=[
        "earlyspring",
        "alarm-clock",
        "scheduler",
        "wake-up",
        "habit-tracking",
        "async",
    ],
)
