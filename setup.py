#!/usr/bin/env python3
"""Setup script for the ISHNE Holter package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read version from package
def get_version():
    """Get version from package __init__.py."""
    init_file = Path(__file__).parent / "ishne_holter" / "__init__.py"
    if init_file.exists():
        with open(init_file, 'r') as f:
            for line in f:
                if line.startswith('__version__'):
                    return line.split('=')[1].strip().strip('"\'')
    return "0.1.0"

# Read long description from README
def get_long_description():
    """Get long description from README.md."""
    readme_file = Path(__file__).parent / "README.md"
    if readme_file.exists():
        with open(readme_file, 'r', encoding='utf-8') as f:
            return f.read()
    return ""

# Read requirements
def get_requirements():
    """Get requirements from requirements.txt."""
    req_file = Path(__file__).parent / "requirements.txt"
    requirements = []
    if req_file.exists():
        with open(req_file, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    requirements.append(line)
    return requirements

setup(
    name="ishne-holter",
    version=get_version(),
    description="Decoder and streaming exporter for ISHNE Holter ECG files",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
        "Topic :: File Formats",
    ],
    python_requires=">=3.9",
    install_requires=get_requirements(),
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "pandas>=1.5.0",
            "black>=22.0.0",
            "isort>=5.10.0",
            "flake8>=4.0.0",
            "mypy>=0.991",
        ],
    },
    entry_points={
        "console_scripts": [
            "ishne-convert=ishne_holter.examples.convert_ishne:main",
            "ishne-plot=ishne_holter.examples.plot_ishne:main",
        ],
    },
    package_data={
        "ishne_holter": ["py.typed"],
    },
    include_package_data=True,
    zip_safe=False,
    keywords=[
        "ecg", "electrocardiogram", "holter", "ishne", "medical-devices",
        "file-format", "signal-processing", "healthcare", "biomedical", "cardiology"
    ],
)
