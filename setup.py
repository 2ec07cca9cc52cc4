"""Setup configuration for n8n-flowview package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="n8n-flowview",
    version="1.0.0",
    description="View n8n workflow JSON files as interactive node-link diagrams in the browser",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "flask>=3.0.0",
        "jinja2>=3.1",
        "click>=8.1.7",
        "rich>=13.7.0",
        "pydantic>=2.5.0",
        "playwright>=1.48.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "n8n-flowview=n8n_flowview.cli:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Utilities",
    ],
    keywords="n8n workflow automation diagram viewer react-flow",
    package_data={
        "n8n_flowview": [
            "templates/*.html",
            "static/*.js",
            "static/*.css",
        ],
    },
)
