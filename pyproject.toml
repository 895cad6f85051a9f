[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shorturl"
version = "0.1.0"
description = "URL shortening service core: storages, background deletion and request handlers"
requires-python = ">=3.10"
dependencies = []
keywords = ["url", "shortener", "short-link", "storage", "handlers"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["shorturl"]

[tool.pytest.ini_options]
addopts = "-ra"
