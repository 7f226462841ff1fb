"""Setup configuration for Marketplace Admin package."""

from setuptools import setup, find_packages

setup(
    name="marketplace-admin",
    version="1.0.0",
    description="Admin console backend for a business listings marketplace",
    author="Marketplace Admin Team",
    author_email="",
    packages=find_packages(include=["api", "api.*", "config", "config.*", "src", "src.*", "scripts"]),
    package_data={"config": ["*.yaml"]},
    python_requires=">=3.11",
    install_requires=[
        "duckdb>=1.0.0",
        "pandas>=2.1.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
            "black>=24.1.0",
            "ruff>=0.2.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "marketplace-init-db=scripts.init_db:main",
            "marketplace-browse=scripts.browse_listings:main",
            "marketplace-api=api.main:run",
        ],
    },
)
