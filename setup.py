from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="watchlist-social",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/`, one top-level
    # package per layer (config/domain/application/infrastructure/server).
    package_dir={"": "backend"},
    packages=find_packages(
        where="backend",
        include=[
            "config",
            "domain",
            "domain.*",
            "application",
            "application.*",
            "infrastructure",
            "infrastructure.*",
            "server",
            "server.*",
        ],
    ),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110",
        "pydantic>=2.6",
        "uvicorn>=0.27",
        "python-dotenv>=1.0",
        "asyncpg>=0.29",
        "PyJWT>=2.8",
        "bcrypt>=4.1",
    ],
    extras_require={
        # Test runner + FastAPI TestClient transport.
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
)
