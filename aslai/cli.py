"""
Command-line entry point.

Runs a classification session over a recorded landmark sequence and
prints each frame's report.

Usage:
    aslai --landmarks recording.npy
    aslai --landmarks recording.npy --threads 4 --debug
    aslai --landmarks recording.npy --config custom_config.yaml
"""

import argparse
import logging
import sys

import numpy as np

from aslai.core.errors import ClassifierError
from aslai.core.session import ClassificationSession
from aslai.detection.replay import ReplayLandmarkSource
from aslai.utils.config import Config
from aslai.utils.logger import setup_logging_from_config

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="ASL AI sign classifier (landmark replay)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Recordings are .npy arrays of shape (frames, 21, 3).
A frame filled with NaN means no hand was detected.
        """,
    )

    parser.add_argument(
        "--landmarks", "-l",
        required=True,
        help="Recorded landmark sequence (.npy)",
    )

    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to configuration file (default: config/config.yaml)",
    )

    parser.add_argument(
        "--threads", "-t",
        type=int,
        default=None,
        help="Inference engine threads (overrides config)",
    )

    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def run(config, source, num_threads=None):
    """Classify every recorded frame; returns the number of frames with a hand."""
    detected = 0
    with ClassificationSession.from_config(config, source) as session:
        if num_threads is not None and num_threads != session.num_threads:
            session.set_num_threads(num_threads)

        # Recorded frames carry no pixels; the replay source ignores them
        blank = np.zeros((1, 1, 3), dtype=np.uint8)
        for frame_id in range(len(source)):
            report = session.classify_frame(blank, timestamp_ms=frame_id * 33)
            detected += int(report.hand_detected)
            print(f"--- frame {report.frame_id} ---")
            print(report.text)

        top = session.rank().top
        if top is not None:
            logger.info("Final top label: %s (%.2f)", top.label, top.score)
    return detected


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    config = Config().load(args.config)
    settings = dict(config.logging_settings)
    if args.debug:
        settings["level"] = "DEBUG"
    setup_logging_from_config(settings)

    try:
        source = ReplayLandmarkSource.from_file(args.landmarks)
        detected = run(config, source, num_threads=args.threads)
    except ClassifierError as e:
        logger.error("%s", e)
        return 1

    logger.info("Classified %d of %d frames", detected, len(source))
    return 0


if __name__ == "__main__":
    sys.exit(main())
