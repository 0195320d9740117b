"""Setup script for arvak_anneal Python package."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="arvak-anneal",
    version="0.1.0",
    author="HIQ Lab",
    author_email="info@hiq-lab.org",
    description="Compile Ising kernels and run them on remote quantum annealers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/hiq-lab/arvak",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.25.0",
        "numpy>=1.21.0",
        "networkx>=2.8",
    ],
    extras_require={
        "embedding": [
            "minorminer>=0.2.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-httpx>=0.21.0",
        ],
        "all": [
            "minorminer>=0.2.0",
            "pytest>=7.0.0",
            "pytest-httpx>=0.21.0",
        ],
    },
)
