[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mshell"
version = "0.1.0"
description = "A small command shell library with pipelines, redirections, quoting, variable expansion and built-in commands"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "command-line", "pipeline", "redirection", "interpreter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mshell"]

[tool.pytest.ini_options]
addopts = "-ra"
