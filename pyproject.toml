[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taskqueue-service"
version = "1.0.0"
description = "HTTP task service that stores tasks in SQLite and processes them through a Redis queue"
requires-python = ">=3.10"
keywords = ["tasks", "queue", "redis", "sqlite", "flask", "worker"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]
dependencies = [
    "flask",
    "redis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
taskqueue-service = "taskqueue_service.main:main"

[tool.hatch.build.targets.wheel]
packages = ["taskqueue_service"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
