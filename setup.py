"""Setup configuration for copilot_metrics"""

from setuptools import setup, find_packages

setup(
    name="copilot-metrics-proxy",
    version="0.1.0",
    description=(
        "Credential-guarded proxy for the GitHub Copilot metrics API with "
        "daily acceptance and per-language aggregation."
    ),
    author="Copilot Metrics Proxy Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "urllib3>=2.3.0",
        "fastapi>=0.100.0",
        "pydantic>=2.0",
        "uvicorn>=0.23.0",
        "rich>=13.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "httpx>=0.24.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "copilot-metrics=copilot_metrics.main:main",
        ],
    },
)
