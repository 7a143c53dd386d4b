[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "planagent"
version = "0.1.0"
description = "A planning agent that asks a DeepSeek chat model for a step-by-step plan and runs it with tool calls, served over HTTP."
requires-python = ">=3.10"
keywords = ["llm", "agent", "planning", "deepseek", "tool-calling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: Flask",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "httpx",
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
planagent = "planagent.server:main"

[tool.hatch.build.targets.wheel]
packages = ["planagent"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
