[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "authguardian"
version = "0.1.0"
description = "Authentication service issuing JWT access tokens and bcrypt-protected refresh tokens bound to the client's IP address"
requires-python = ">=3.10"
keywords = ["authentication", "jwt", "refresh-token", "flask", "session", "bcrypt"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Session",
    "Topic :: Security",
]
dependencies = [
    "flask",
    "pyjwt",
    "bcrypt",
    "sqlalchemy",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
authguardian = "authguardian.app:main"

[tool.hatch.build.targets.wheel]
packages = ["authguardian"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
