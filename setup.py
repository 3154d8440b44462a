"""
Setup script for the mental-poker-client package.

Installs the `mental_poker` package from src/ and the `mental-poker`
console script.
"""

from setuptools import setup, find_packages

setup(
    name="mental-poker-client",
    version="0.1.0",
    description="Three-seat mental poker client: protocol orchestration over a shared ledger",
    author="Mental Poker Contributors",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "requests>=2.31.0",
        "treys>=0.1.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.4,<9",
        ],
        "dev": [
            "pytest>=7.4,<9",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "mental-poker=mental_poker.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
    ],
)
