from setuptools import find_packages, setup


setup(
    name="pg_scram_client",
    description="Client side SCRAM-SHA-256 authentication for PostgreSQL-compatible servers",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    license="LGPLv3",
    python_requires=">=3.11",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
