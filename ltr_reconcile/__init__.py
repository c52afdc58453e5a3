"""Public package exports for ltr_reconcile."""

from importlib.metadata import version, PackageNotFoundError

__all__ = [
    "parser",
    "model",
    "filters",
    "index",
    "scoring",
    "resolver",
    "merge",
    "serializer",
    "pipeline",
    "summary",
    "render_svg",
]

try:
    __version__ = version("ltr-reconcile")
except PackageNotFoundError:  # pragma: no cover - during local source usage
    __version__ = "0.0.0"
