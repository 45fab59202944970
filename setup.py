from setuptools import setup, find_packages

setup(
    name="interpreter-assignments",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "sqlalchemy[asyncio]>=2.0",
        "pydantic>=2",
        "pydantic-settings",
        "aiosqlite",
        "python-dateutil",
        "python-json-logger",
        "prometheus-client",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
)
