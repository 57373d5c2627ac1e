[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icecand"
version = "0.1.0"
description = "ICE candidates: parsing, marshalling, priorities, candidate pairs and 1:1 NAT address mapping"
requires-python = ">=3.10"
dependencies = []
keywords = ["ice", "webrtc", "nat", "candidate", "sdp", "rfc8445", "rfc5245", "rfc6544"]
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
    "Topic :: Internet",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["icecand"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
