from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running this file directly (e.g. `python tools/inspect_model.py`).
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from piper_runner.application.errors import ModelLoadError
from piper_runner.domain.vo.model_input import REQUIRED_INPUT_COUNT
from piper_runner.infrastructure.onnx.model_loader import OnnxModelLoader


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the inputs a Piper ONNX voice declares")
    parser.add_argument("model", help="Path to the .onnx voice")
    args = parser.parse_args()

    try:
        model = OnnxModelLoader().load(args.model)
    except ModelLoadError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"model: {model.path}")
    print(f"inputs ({len(model.inputs)}):")
    for i, slot in enumerate(model.inputs):
        print(f"  #{i} {slot.describe()}")
    print(f"outputs: {', '.join(model.output_names)}")

    if not model.inputs.is_complete:
        print(f"warning: fewer than {REQUIRED_INPUT_COUNT} inputs; synthesis will abort.")
        return 2
    if len(model.inputs) > REQUIRED_INPUT_COUNT:
        extra = ", ".join(model.inputs.names[REQUIRED_INPUT_COUNT:])
        print(f"warning: extra inputs are never bound ({extra}); every sentence will be skipped.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
