"""
Setup configuration for ngsrun
"""
from setuptools import setup, find_packages

setup(
    name="ngsmanager-runner",
    version="0.1.0",
    description="Run single NGSManager pipeline steps with nextflow from the command line",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "dev": [
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ngsrun=ngsrun.main:main",
        ],
    },
)
