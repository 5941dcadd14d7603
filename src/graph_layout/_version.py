from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "annealed-graph-layout"


def _source_checkout_version() -> str:
    """VERSION file at the repo root of a src-layout checkout."""
    vf = Path(__file__).resolve().parents[2] / "VERSION"
    try:
        return vf.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"


try:
    __version__ = version(DISTRIBUTION)
except PackageNotFoundError:
    __version__ = _source_checkout_version()
