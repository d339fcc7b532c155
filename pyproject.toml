[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ofwire"
version = "0.1.0"
description = "Encoding and decoding of OpenFlow 1.3 switch protocol message bodies"
requires-python = ">=3.10"
dependencies = []
keywords = ["openflow", "sdn", "networking", "protocol", "wire-format"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ofwire"]

[tool.pytest.ini_options]
addopts = "-ra"
