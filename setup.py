#!/usr/bin/env python3
"""
Setup script for textvec - OpenAI text embeddings with fail-soft batching
"""

from setuptools import setup, find_packages
import os
import re

def read_version():
    """Read version from __init__.py"""
    here = os.path.abspath(os.path.dirname(__file__))
    with open(os.path.join(here, 'src', 'textvec', '__init__.py'), 'r') as f:
        content = f.read()
        version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", content, re.M)
        if version_match:
            return version_match.group(1)
    raise RuntimeError("Unable to find version string.")

def read_long_description():
    """Read long description from README."""
    with open('README.md', 'r', encoding='utf-8') as f:
        return f.read()

setup(
    name="textvec",
    version=read_version(),
    author="neuroLM",
    description="OpenAI text embeddings with lazy client setup and fail-soft batching",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU Affero General Public License v3",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.7.0",
        "httpx>=0.26.0",
        "openai>=1.40.0",
        "orjson>=3.9.10",
        "numpy>=1.24.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.12.0",
            "black>=23.11.0",
            "isort>=5.12.0",
            "mypy>=1.7.0",
            "coverage>=7.3.0",
        ],
    },
    zip_safe=False,
)
