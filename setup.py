from setuptools import setup, find_packages

setup(
    name="simtrader",
    version="1.0.0",
    packages=find_packages(include=["core", "core.*", "cli", "cli.*", "simtrader_common", "simtrader_common.*"]),
    install_requires=[
        "click>=8.1.0",
        "requests>=2.31.0",
        "tenacity>=8.2.0",
        "pydantic>=2.0.0",
        "pandas>=2.2.0",
        "numpy>=1.26.3",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "simtrader=cli.main:main",
        ],
    },
    author="SimTrader",
    author_email="your.email@example.com",
    description="Rule-based trading signal backtester with simulated execution and performance analytics",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
)
