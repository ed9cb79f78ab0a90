"""Top-level package for the Mailbox Toolkit.

Provides subpackages:
- mailbox_toolkit.core – resident/building models, errors, row schemas
- mailbox_toolkit.ordering – name/priority sorting and apartment grouping
- mailbox_toolkit.labels – mailbox label pagination
- mailbox_toolkit.documents – document assembly for the PDF renderer
- mailbox_toolkit.output – reportlab PDF rendering
- mailbox_toolkit.store / auth – hosted backend and spreadsheet access
- mailbox_toolkit.workflow – resident management, intake and reordering
- mailbox_toolkit.gui – GUI app
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text(encoding="utf-8")
        except OSError:
            content = ""
        for line in content.splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.1"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("mailbox_toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
