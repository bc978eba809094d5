[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grpcwire"
version = "0.1.0"
description = "gRPC wire-format building blocks: framing, status codes, metadata, marshalling and service stub code generation"
requires-python = ">=3.10"
dependencies = [
    "protobuf",
]
keywords = ["grpc", "protobuf", "http2", "framing", "metadata", "codegen", "protoc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Internet",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
protoc-gen-rust-grpc = "grpcwire.codegen:main"

[tool.hatch.build.targets.wheel]
packages = ["grpcwire"]

[tool.hatch.build.targets.sdist]
include = ["grpcwire", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
