"""Application entry point for the Gaia globe viewer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence, TextIO

from PySide6.QtWidgets import QApplication

from gaia_viewer.services.feature_importer import FeatureImportError, load_feature_records
from gaia_viewer.ui.constants import DEFAULT_FEATURES_FILE
from gaia_viewer.ui.main_window import ViewerWindow

logger = logging.getLogger("gaia_viewer")

DEFAULT_LOG_FILE = Path("application.log")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gaia-viewer",
        description="Interactive styled globe viewer.",
    )
    parser.add_argument(
        "--features",
        type=Path,
        default=DEFAULT_FEATURES_FILE,
        help="GeoJSON or CSV feature attribute table.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logs.")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=DEFAULT_LOG_FILE,
        help="Where to write the application log (default: ./application.log).",
    )
    return parser


def report_error(error: BaseException, stream: TextIO | None = None) -> None:
    """Print an error followed by every exception it was raised from."""
    out = stream if stream is not None else sys.stderr
    print(f"error: {error}", file=out)
    cause = error.__cause__ or error.__context__
    while cause is not None:
        print(f"caused by: {cause}", file=out)
        cause = cause.__cause__ or cause.__context__


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, load features and run the Qt event loop."""

    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=str(args.log_file),
        filemode="w",
    )

    try:
        records = load_feature_records(args.features)
    except FeatureImportError as exc:
        logger.error("Feature import failed: %s", exc)
        report_error(exc)
        return 1

    app = QApplication.instance() or QApplication(sys.argv)
    window = ViewerWindow(records)
    window.show()
    exit_code = app.exec()

    if window.init_error is not None:
        report_error(window.init_error)
        return 1
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
