import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# Rebuilt per interpreter; cached wheels can carry a .so for the wrong Python.
_C_EXT_PACKAGES = ["psycopg2-binary"]

DOMAIN_TEST_DIRS = [
    "tests/identity/domain/",
    "tests/catalogue/domain/",
    "tests/ordering/domain/",
    "tests/notifications/domain/",
    "tests/shared/domain/",
    "tests/storage/domain/",
]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.install("-e", ".[test]")
    session.install("--force-reinstall", "--no-cache-dir", *_C_EXT_PACKAGES)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the full suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no infrastructure required)."""
    _install(session)
    session.run("pytest", *DOMAIN_TEST_DIRS)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_api(session: nox.Session) -> None:
    """Run the HTTP API and behaviour scenarios."""
    _install(session)
    session.run("pytest", "-m", "integration or bdd")
