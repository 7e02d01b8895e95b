[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toolnotif"
version = "0.1.0"
description = "Watch tool status files and post them to a dashboard from a background daemon"
requires-python = ">=3.11"
keywords = ["dashboard", "status", "daemon", "monitoring", "notifier"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "requests>=2.28",
    "tomli-w>=1.0",
    "termcolor>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
toolnotif = "toolnotif.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["toolnotif"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
