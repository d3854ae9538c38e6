[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netbench"
version = "0.1.0"
description = "Building blocks for network throughput measurement: unit parsing and formatting, timers, test settings, socket helpers, byte order and TCP statistics."
requires-python = ">=3.10"
dependencies = []
keywords = ["network", "throughput", "bandwidth", "tcp", "sockets", "timers", "tcp_info"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
    "Topic :: System :: Benchmark",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["netbench"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
