"""Command-line interface for maskfit.

Runs the pose/measurement pipeline over a recording of face mesh
detector output (.npy of shape (frames, n, 3) or .json list of meshes).
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from maskfit.config import MeasureConfig, NoseDepthMethod
from maskfit.errors import MissingLandmarkError

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected an integer >= 1, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maskfit",
        description="Head pose and facial measurements from face mesh recordings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  maskfit pose meshes.npy                       # Euler angles per frame
  maskfit measure meshes.npy                    # Measurements per frame
  maskfit measure meshes.npy --nose-depth transverse --json
  maskfit measure meshes.npy --record 200 --record-name subject01
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    sub = parser.add_subparsers(dest="command")

    pose_p = sub.add_parser("pose", help="Estimate head pose per frame")
    pose_p.add_argument("path", help="Mesh recording (.npy or .json)")
    pose_p.add_argument("--max-frames", type=_positive_int, default=None, help="Stop after N frames")

    measure_p = sub.add_parser("measure", help="Measure facial dimensions per frame")
    measure_p.add_argument("path", help="Mesh recording (.npy or .json)")
    measure_p.add_argument("--max-frames", type=_positive_int, default=None, help="Stop after N frames")
    measure_p.add_argument(
        "--nose-depth",
        choices=[m.value for m in NoseDepthMethod],
        default=NoseDepthMethod.DIRECT.value,
        help="Nose depth strategy (default: direct)",
    )
    measure_p.add_argument(
        "--tolerance",
        type=float,
        default=1.5,
        help="Skip planes closer than this many degrees to edge-on (default: 1.5)",
    )
    measure_p.add_argument(
        "--window",
        type=_positive_int,
        default=50,
        help="Moving average window in frames (default: 50)",
    )
    measure_p.add_argument(
        "--record",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Record N frames to a JSON log (see MASKFIT_LOG_DIR)",
    )
    measure_p.add_argument(
        "--record-name",
        default=None,
        help="File stem for --record (default: random uuid)",
    )
    measure_p.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON record per frame instead of text",
    )

    return parser


def load_meshes(path) -> np.ndarray:
    """Load a (frames, n, 3) mesh recording.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: On an unsupported suffix or shape.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Mesh recording not found: {path}")

    if path.suffix == ".npy":
        meshes = np.load(path)
    elif path.suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            meshes = np.asarray(json.load(f), dtype=np.float64)
    else:
        raise ValueError(f"Unsupported mesh recording format: {path.suffix}")

    if meshes.ndim == 2:
        meshes = meshes[np.newaxis, ...]
    if meshes.ndim != 3 or meshes.shape[2] != 3:
        raise ValueError(f"Expected (frames, n, 3) meshes, got shape {meshes.shape}")
    return meshes


def _fmt(value) -> str:
    return "-" if value is None else f"{value:.1f}"


def _cmd_pose(args: argparse.Namespace) -> int:
    """Handle ``maskfit pose``."""
    from maskfit.landmarks import LandmarkSet
    from maskfit.pose import estimate_pose

    meshes = load_meshes(args.path)
    failed = 0
    for i, mesh in enumerate(meshes[:args.max_frames]):
        try:
            pose = estimate_pose(LandmarkSet.from_mesh(mesh))
        except MissingLandmarkError as e:
            logger.warning("frame %d skipped: %s", i, e)
            failed += 1
            continue
        a = pose.angles
        print(f"  frame={i} X:{a.rotx:.1f} Y:{a.roty:.1f} Z:{a.rotz:.1f}")
    return 1 if failed else 0


def _cmd_measure(args: argparse.Namespace) -> int:
    """Handle ``maskfit measure``."""
    from maskfit.recorder import MeasurementRecorder
    from maskfit.session import MeasurementSession

    config = MeasureConfig(
        tolerance_deg=args.tolerance,
        nose_depth_method=args.nose_depth,
        smoothing_window=args.window,
    )
    recorder = None
    if args.record:
        recorder = MeasurementRecorder(num_frames=args.record, filename=args.record_name)
        recorder.start()

    session = MeasurementSession(config, recorder=recorder)
    meshes = load_meshes(args.path)
    failed = 0
    for i, mesh in enumerate(meshes[:args.max_frames]):
        try:
            result = session.process(mesh)
        except MissingLandmarkError as e:
            logger.warning("frame %d skipped: %s", i, e)
            failed += 1
            continue

        if args.json:
            print(json.dumps({"frame": i, **result.to_record()}))
        else:
            m = result.plane
            print(
                f"  frame={i} noseWidth={_fmt(m.nose_width)} noseDepth={_fmt(m.nose_depth)} "
                f"faceHeight={_fmt(m.face_height)} faceWidth={_fmt(m.face_width)}"
            )

    if recorder is not None and recorder.is_recording:
        recorder.stop_and_save()
    if recorder is not None and recorder.saved_path is not None:
        print(f"Saved recording to {recorder.saved_path}", file=sys.stderr)

    print(f"\nDone: {session.frame_count} frames measured, {failed} skipped", file=sys.stderr)
    return 1 if failed else 0


def main(argv=None):
    """Entry point for ``maskfit`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "pose":
            code = _cmd_pose(args)
        else:
            code = _cmd_measure(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    sys.exit(code)


if __name__ == "__main__":
    main()
