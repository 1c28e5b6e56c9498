[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "saslkit"
version = "0.1.0"
description = "SASL framework: mechanism interfaces, provider registry, security policy filtering, QOP helpers and callbacks"
requires-python = ">=3.10"
dependencies = []
keywords = ["sasl", "authentication", "security", "qop", "mechanism"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["saslkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
