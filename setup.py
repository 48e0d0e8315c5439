from setuptools import setup, find_packages
import os

# Install the type checker package `tscheme` from the repo root.

# Read the contents of your README file for long description
this_directory = os.path.abspath(os.path.dirname(__file__))
try:
    with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = "A static type checker for a fully annotated Scheme dialect"

setup(
    name="tscheme",
    version="0.1.0",
    description="A static type checker for a fully annotated Scheme dialect",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["tscheme", "tscheme.*"]),
    python_requires=">=3.10",
    install_requires=[
        "lark",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "tscheme=tscheme.cli:main",
        ],
    },
)
