[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boardhub"
version = "1.0.0"
description = "Shared board rooms over HTTP and WebSocket, backed by Redis pub/sub"
requires-python = ">=3.10"
keywords = ["websocket", "redis", "pubsub", "board", "rooms", "aiohttp", "consul"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "aiohttp>=3.9",
    "redis>=5.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
boardhub = "boardhub.app:main"

[tool.hatch.build.targets.wheel]
packages = ["boardhub"]

[tool.pytest.ini_options]
addopts = "-ra"
