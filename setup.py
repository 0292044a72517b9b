#!/usr/bin/env python3
"""
fileinfo Setup Script
"""

from pathlib import Path
from setuptools import find_packages, setup

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_file.exists():
    requirements = [
        line.strip()
        for line in requirements_file.read_text().splitlines()
        if line.strip() and not line.startswith("#")
    ]

setup(
    name="fileinfo-report",
    version="1.0.0",
    description="Forensics-style single file inspection report for live Linux hosts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="fileinfo Contributors",
    license="MIT",

    # Packages
    packages=find_packages(exclude=["tests", "tests.*", "docs"]),
    include_package_data=True,

    # Requirements
    python_requires=">=3.10",
    install_requires=requirements,

    # Optional dependencies
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "black>=23.0",
            "flake8>=6.0",
            "mypy>=1.0",
        ],
    },

    # Entry points
    entry_points={
        "console_scripts": [
            "fileinfo=fileinfo.cli:main",
        ],
    },

    # Classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Information Technology",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Security",
        "Topic :: System :: Systems Administration",
    ],

    # Keywords
    keywords="forensics incident-response chain-of-custody inode metadata dfir",
)
