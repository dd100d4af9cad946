[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pdfforge"
version = "0.1.0"
description = "Build, inspect and edit PDF document object graphs: pages, resources, bookmarks, destinations and content streams."
requires-python = ">=3.10"
dependencies = []
keywords = ["pdf", "editing", "manipulation", "bookmarks", "outline", "content-stream"]
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
    "Topic :: Text Processing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pdfforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
