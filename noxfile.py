# topmark:header:start
#
#   project      : SpanMark
#   file         : noxfile.py
#   file_relpath : noxfile.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SpanMark project automation via Nox (uv-backed virtualenvs).

Sessions:
  - `qa`: pytest (fast suites) and pyright, once per supported Python.
  - `goldens`: only the byte-exact rendering fixtures.
  - `property_test`: the long hypothesis runs (opt-in).
  - `lint` / `lint_fixall`: Ruff lint, optionally autofixing.
  - `format_check` / `format`: Ruff formatting.
  - `package_check`: build sdist/wheel and run `twine check`.

Python versions come from the `Programming Language :: Python :: X.Y`
classifiers in `pyproject.toml`, so the matrix never drifts from the metadata.
"""

from __future__ import annotations

import pathlib
import sys
import warnings
from typing import TYPE_CHECKING, Any, cast

import nox

if TYPE_CHECKING:
    from collections.abc import Callable

if sys.version_info >= (3, 11):
    import tomllib

    _toml_loads = cast("Callable[[str], dict[str, Any]]", tomllib.loads)  # type: ignore[assignment]
else:
    import toml

    _toml_loads = cast("Callable[[str], dict[str, Any]]", toml.loads)  # type: ignore[assignment]

HERE: pathlib.Path = pathlib.Path(__file__).parent
RUNNING_PYTHON: str = f"{sys.version_info[0]}.{sys.version_info[1]}"
CLASSIFIER_PREFIX: str = "Programming Language :: Python :: "
DEV_EXTRAS: str = ".[test,dev]"
FAST_MARKERS: str = "not slow and not hypothesis_slow"


def classifier_pythons() -> list[str]:
    """Return the ``X.Y`` versions listed in the project classifiers, oldest first.

    Evaluated when the noxfile is imported, so only the standard library (or
    `toml` on 3.10) may be used here.
    """
    pyproject: pathlib.Path = HERE / "pyproject.toml"
    try:
        project: Any = _toml_loads(pyproject.read_text(encoding="utf-8")).get("project", {})
    except (OSError, ValueError):
        project = {}

    classifiers: Any = project.get("classifiers") if isinstance(project, dict) else None
    if not isinstance(classifiers, list):
        warnings.warn(
            f"No classifiers in {pyproject.name}; using Python {RUNNING_PYTHON} only.",
            RuntimeWarning,
            stacklevel=2,
        )
        return [RUNNING_PYTHON]

    found: set[tuple[int, int]] = set()
    for entry in cast("list[str]", classifiers):
        major, _, minor = entry.removeprefix(CLASSIFIER_PREFIX).partition(".")
        if entry.startswith(CLASSIFIER_PREFIX) and major.isdigit() and minor.isdigit():
            found.add((int(major), int(minor)))
    return [f"{major}.{minor}" for major, minor in sorted(found)] or [RUNNING_PYTHON]


PYTHONS: list[str] = classifier_pythons()

# The multi-Python QA matrix is run explicitly or in CI.
nox.options.sessions = ["lint", "format_check"]
nox.options.default_venv_backend = "uv"


def _install(session: nox.Session) -> None:
    session.install("-e", DEV_EXTRAS)


@nox.session(python=PYTHONS)
def qa(session: nox.Session) -> None:
    """Run the fast test suites and pyright for one Python version."""
    _install(session)
    session.run("pytest", "-q", "-m", FAST_MARKERS, *session.posargs)

    if not isinstance(session.python, str):
        raise RuntimeError(f"Unexpected session.python value: {session.python!r}")
    session.run("pyright", "--pythonversion", session.python)


@nox.session
def goldens(session: nox.Session) -> None:
    """Run only the byte-exact rendering fixtures."""
    _install(session)
    session.run("pytest", "-q", "-m", "golden", *session.posargs)


@nox.session
def property_test(session: nox.Session) -> None:
    """Run the long-running hypothesis properties."""
    _install(session)
    session.run("pytest", "-vv", "-m", "hypothesis_slow", *session.posargs)


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff lint checks."""
    _install(session)
    session.run("ruff", "check", ".")


@nox.session
def lint_fixall(session: nox.Session) -> None:
    """Run ruff lint checks and apply the available fixes."""
    _install(session)
    session.run("ruff", "check", "--fix", ".")


@nox.session
def format_check(session: nox.Session) -> None:
    """Verify that the tree is ruff-formatted."""
    _install(session)
    session.run("ruff", "format", "--check", ".")


@nox.session
def format(session: nox.Session) -> None:
    """Apply ruff formatting."""
    _install(session)
    session.run("ruff", "format", ".")


@nox.session(python=RUNNING_PYTHON)
def package_check(session: nox.Session) -> None:
    """Build the sdist and wheel into a clean ``dist/`` and validate their metadata."""
    _install(session)
    session.run("python", "-c", "import shutil; shutil.rmtree('dist', ignore_errors=True)")
    session.run("python", "-m", "build", "--sdist", "--wheel")
    session.run("twine", "check", "dist/*")
