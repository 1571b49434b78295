"""Setup configuration for solar quote service."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="solar-quote-service",
    version="1.0.0",
    author="Solar Model Team",
    description="Solar installation quotes: sizing, cashflow metrics and assembled PDF proposals",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["run_server"],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "scipy>=1.10.0",
        "python-dateutil>=2.8.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic-settings>=2.0.0",
        "playwright>=1.40.0",
        "PyPDF2>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.3.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.24.0",
        ]
    },
)
