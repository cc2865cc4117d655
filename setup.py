from setuptools import setup, find_packages

setup(
    name="icofr-rules",
    version="0.1.0",
    description="Regulatory calculators for ICOFR risk rating, sampling, materiality and deficiency classification",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"icofr.config": ["rules_config.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "structlog>=23.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "icofr-rules=icofr.cli:main",
        ],
    },
)
