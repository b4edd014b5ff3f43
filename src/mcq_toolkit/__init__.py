"""Top-level package for the MCQ sheet extraction toolkit.

Provides subpackages:
- mcq_toolkit.core – immutable data models and output schema validation
- mcq_toolkit.common – shared thresholds
- mcq_toolkit.extractor – document-to-questions pipeline
- mcq_toolkit.cli – command-line entry point
"""


def _get_version() -> str:
    """Get version from importlib.metadata (installed) or pyproject.toml (dev)."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version
    from pathlib import Path

    try:
        return pkg_version("mcq_toolkit")
    except PackageNotFoundError:
        pass

    # In dev mode, read directly from pyproject.toml
    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.0"
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__"]
