"""Quote branding: colors and logo path."""
from pathlib import Path

QUOTE_DARK = "#1e293b"        # body text, headings
QUOTE_MUTED = "#64748b"       # small text, footer
QUOTE_ACCENT = "#646cff"      # grand total
QUOTE_ACCENT_DARK = "#1e3a8a"  # table header, section headings
QUOTE_GRID = "#e2e8f0"        # table grid, borders
QUOTE_LIGHT_BG = "#f8fafc"
QUOTE_WHITE = "#ffffff"

LOGO_FILENAME = "logo.png"


def _project_root() -> Path:
    """Project root (parent of hostquote package)."""
    return Path(__file__).resolve().parent.parent.parent


def _asset_candidates(filename: str, static_dir: Path | None = None) -> list[Path]:
    """Candidate paths for an asset: static dir first, then project root, then cwd."""
    candidates = []
    if static_dir is not None and Path(static_dir).is_dir():
        candidates.append(Path(static_dir).resolve() / filename)
    root = _project_root()
    candidates.append(root / "static" / filename)
    cwd = Path.cwd()
    if cwd != root:
        candidates.append(cwd / "static" / filename)
    return candidates


def get_logo_path(static_dir: Path | None = None) -> Path | None:
    """Path to the quote logo, or None when no logo is deployed."""
    for path in _asset_candidates(LOGO_FILENAME, static_dir):
        if path.is_file():
            return path
    return None
