"""Entrypoint for the packaged RateShare admin app.

Run from source or as a frozen (PyInstaller) build; extra command-line
arguments are forwarded to ``streamlit run``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path


STREAMLIT_FLAGS = ("--server.headless=false", "--browser.gatherUsageStats=false")


def resolve_roots() -> tuple[Path, Path]:
    """Return (bundle_root, runtime_root): where app.py ships and where data is kept."""
    if getattr(sys, "frozen", False):
        return Path(getattr(sys, "_MEIPASS")), Path(sys.executable).resolve().parent
    here = Path(__file__).resolve().parent
    return here, here


def streamlit_argv(app_path: Path, extra_args: list[str] | None = None) -> list[str]:
    return ["streamlit", "run", str(app_path), *STREAMLIT_FLAGS, *(extra_args or [])]


def main() -> None:
    bundle_root, runtime_root = resolve_roots()
    os.environ.setdefault("RATESHARE_STORAGE_ROOT", str(runtime_root / ".local_store"))
    os.environ.setdefault("STREAMLIT_BROWSER_GATHER_USAGE_STATS", "false")
    os.chdir(runtime_root)

    from streamlit.web import cli as stcli

    sys.argv = streamlit_argv(bundle_root / "app.py", sys.argv[1:])
    raise SystemExit(stcli.main())


if __name__ == "__main__":
    main()
