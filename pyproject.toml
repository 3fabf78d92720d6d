[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "repotools"
version = "0.1.0"
description = "Maintenance tools for repositories with many Go modules: Dependabot configuration, CODEOWNERS and issue-template generation, template rendering and CI failure reporting."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
    "requests",
]
keywords = [
    "build-tools",
    "dependabot",
    "codeowners",
    "templates",
    "ci",
    "github",
    "go-modules",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gotmpl = "repotools.gotmpl:main"
dbotconf = "repotools.dbotconf.cli:main"
githubgen = "repotools.githubgen.cli:main"
issuegenerator = "repotools.issuegenerator:main"

[tool.hatch.build.targets.wheel]
packages = ["repotools"]

[tool.hatch.build.targets.sdist]
include = [
    "repotools",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
