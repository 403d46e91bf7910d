"""Command-line entry point for running the dashboard pipeline headless.

Streams synthetic samples into the window, rebuilds every view's frame on
each new point, and lets the per-view schedulers draw at the target frame
rate. Drawing is a stub that only maps points to pixels; the interesting
output is the periodic metrics log. ``--qt`` runs the same loop on a Qt event loop
using :class:`~streamdash.gui.qt_ticker.QtTickSource`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import load_config
from .core.models import ConfigurationError, FilterConfig
from .core.session import DashboardSession

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="streamdash headless runner")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a dashboard YAML file (default: built-in defaults)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="How long to stream, in seconds (default: 10)",
    )
    parser.add_argument(
        "--stress",
        type=int,
        default=0,
        help="Preload the window with N synthetic history points",
    )
    parser.add_argument(
        "--aggregation",
        choices=["none", "1min", "5min", "1hour"],
        default=None,
        help="Override the configured time-bucket aggregation",
    )
    parser.add_argument(
        "--categories",
        type=str,
        default=None,
        help="Comma-separated category labels to keep (default: all)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=None,
        help="Override the target frame rate",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the synthetic generator",
    )
    parser.add_argument(
        "--qt",
        action="store_true",
        help="Tick the schedulers from a Qt event loop instead of threads",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser


def _mapping_draw(name: str):
    def draw(series, mapper) -> None:
        xs, _ = mapper.map_series(series)
        logger.debug("%s: mapped %d points", name, xs.size)

    return draw


def _run_qt(session: DashboardSession, duration_s: float) -> None:
    from PySide6.QtCore import QCoreApplication, QTimer

    from .gui.qt_ticker import QtTickSource

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    sources = [QtTickSource(view.scheduler) for view in session.views.values()]
    for source in sources:
        source.start()

    def _ingest() -> None:
        session.ingest_synthetic()
        session.refresh()

    ingest_timer = QTimer()
    ingest_timer.setInterval(session.config.stream_interval_ms)
    ingest_timer.timeout.connect(_ingest)
    ingest_timer.start()

    def _finish() -> None:
        ingest_timer.stop()
        for source in sources:
            source.stop()
        for name, values in session.metrics().items():
            logger.info("Finished %s: %s", name, ", ".join(f"{k}={v:.2f}" for k, v in values.items()))
        app.quit()

    session.refresh()
    QTimer.singleShot(int(duration_s * 1000), _finish)
    app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.fps is not None:
            config.target_fps = args.fps
        if args.aggregation is not None:
            config.aggregation = args.aggregation
        if args.categories is not None:
            config.categories = tuple(c.strip() for c in args.categories.split(",") if c.strip())
        session = DashboardSession(config=config, draw_factory=_mapping_draw, seed=args.seed)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info("Filter: %s", _describe_filter(session.filter))
    if args.stress > 0:
        session.stress(args.stress)

    if args.qt:
        _run_qt(session, args.duration)
    else:
        session.run_headless(args.duration)
    return 0


def _describe_filter(config: FilterConfig) -> str:
    cats = ",".join(sorted(config.categories)) or "all"
    bucket = config.aggregation_bucket_ms
    return f"categories={cats} aggregation={'none' if bucket is None else f'{bucket}ms'}"


if __name__ == "__main__":
    sys.exit(main())
