from __future__ import annotations

import argparse

from piper_runner.domain.vo.backend import BackendType


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synthesize speech with a Piper ONNX voice")
    parser.add_argument(
        "text",
        nargs="?",
        help="Text to speak. If omitted, read from stdin (ignored with --gui).",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env). Use empty to disable.",
    )
    parser.add_argument("--output", "-o", default=None, help="Write the clip to this WAV file.")
    parser.add_argument("--play", action="store_true", help="Play the clip on the default device.")
    parser.add_argument("--gui", action="store_true", help="Open the desktop window instead.")
    parser.add_argument("--voice", default=None, help="espeak voice override (e.g. en-us).")
    parser.add_argument(
        "--backend",
        default=None,
        choices=[b.value for b in BackendType],
        help="Inference backend override.",
    )
    parser.add_argument("--save-log", action="store_true", help="Save the log under logs/.")
    parser.add_argument("--quiet", action="store_true", help="Do not echo the log to stderr.")
    return parser.parse_args(argv)
