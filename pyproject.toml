[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swebot"
version = "0.1.0"
description = "Webhook checks, task tracking and Claude CLI integration for comment-driven code changes on GitHub"
requires-python = ">=3.10"
keywords = ["github", "webhook", "agent", "claude", "automation", "git"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Version Control :: Git",
]
dependencies = [
    "jinja2",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["swebot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
