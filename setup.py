################################################################################
# VOLCOP
#
# @file:        setup.py
# @module:      setup
# @description: Setuptools configuration and CLI packaging for Volcop.
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2026 Volcop Contributors
# MIT License: see LICENSE or https://opensource.org/licenses/MIT
################################################################################

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description (optional)
readme_file = Path(__file__).parent / "README.md"
long_description = ""
if readme_file.exists():
    long_description = readme_file.read_text(encoding="utf-8")

setup(
    name="volcop",
    version="1.0.0",
    description="Point-in-time backups of a container's volumes to local tar archives",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Volcop Contributors",
    author_email="",
    license="MIT",

    packages=find_packages(exclude=("tests*", "docs*", "examples*")),

    include_package_data=True,
    zip_safe=False,

    python_requires=">=3.10",

    install_requires=[
        "typer>=0.12.0",
        "rich>=13.0.0",
        "pydantic>=2.0.0",
        "docker>=7.0.0",
        "requests>=2.31.0",
    ],

    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
            "black>=22.0.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },

    entry_points={
        "console_scripts": [
            "volcop=volcop.cli.main:cli_main",
        ],
    },

    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Archiving :: Backup",
        "Topic :: Utilities",
    ],

    keywords="docker backup volumes tar cold-backup",
)
