[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatplugins"
version = "0.1.0"
description = "Chat-bot features: essays, drift bottles, jokes, request handling, emoji mixing, epidemic lookup, outfit albums, repository search, text rendering, daily fortune slips and gacha draws."
requires-python = ">=3.10"
keywords = ["chatbot", "plugins", "emoji", "gacha", "fortune", "drift-bottle"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "requests",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chatplugins"]

[tool.pytest.ini_options]
addopts = "-ra"
