"""Measurement session recorder.

Collects a fixed number of frames of flat measurement dicts and writes
them as one JSON object keyed by field name, values in append order:

    {"rotx": [0.1, 0.3, ...], "noseWidth": [31.2, null, ...], ...}
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from maskfit.config import get_log_dir

logger = logging.getLogger(__name__)


class MeasurementRecorder:
    """Records ``num_frames`` frames, then saves automatically.

    Args:
        num_frames: Frames to collect before saving.
        filename: Output file stem. A uuid4 is used when None.
        log_dir: Output directory. Defaults to :func:`get_log_dir`.

    Example:
        >>> recorder = MeasurementRecorder(num_frames=100)
        >>> recorder.start()
        >>> recorder.append([angles.to_dict(), measures.to_dict()])
    """

    def __init__(
        self,
        num_frames: int = 1000,
        filename: Optional[str] = None,
        log_dir: Optional[Path] = None,
    ):
        if num_frames < 1:
            raise ValueError(f"num_frames must be >= 1, got {num_frames}")
        self.num_frames = num_frames
        self.filename = filename
        self._log_dir = Path(log_dir) if log_dir is not None else None
        self._data: Dict[str, List[Any]] = {}
        self._frame = 0
        self._is_recording = False
        self.saved_path: Optional[Path] = None

    @property
    def is_recording(self) -> bool:
        return self._is_recording

    @property
    def frame_count(self) -> int:
        return self._frame

    @property
    def data(self) -> Dict[str, List[Any]]:
        return self._data

    def start(self) -> None:
        """Begin a new recording, discarding any unsaved data."""
        logger.info("Recording started (%d frames)", self.num_frames)
        self._data = {}
        self._frame = 0
        self.saved_path = None
        self._is_recording = True

    def append(self, items: Sequence[Optional[Mapping[str, Any]]]) -> None:
        """Add one frame. Ignored unless recording.

        Args:
            items: Flat dicts for this frame, e.g. [angles, measures, iris].
                None entries are skipped.
        """
        if not self._is_recording:
            return

        for item in items:
            if item is None:
                continue
            for key, value in item.items():
                self._data.setdefault(key, []).append(value)
        self._frame += 1

        if self._frame >= self.num_frames:
            self.stop_and_save()

    def stop_and_save(self) -> Optional[Path]:
        """Stop recording and write the JSON file.

        Returns:
            Path of the written file, or None if not recording.
        """
        if not self._is_recording:
            return None
        self._is_recording = False

        log_dir = self._log_dir or get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        stem = self.filename if self.filename else str(uuid.uuid4())
        path = log_dir / f"{stem}.json"

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)

        self.saved_path = path
        logger.info("Recording stopped after %d frames, saved to %s", self._frame, path)
        return path


def load_recording(path: str | Path) -> Dict[str, List[Any]]:
    """Read a file written by MeasurementRecorder.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Recording not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def recording_summary(data: Mapping[str, List[Any]]) -> Dict[str, Dict[str, Any]]:
    """Per-field count of available values and their mean."""
    summary: Dict[str, Dict[str, Any]] = {}
    for key, values in data.items():
        numeric = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
        summary[key] = {
            "count": len(numeric),
            "mean": sum(numeric) / len(numeric) if numeric else None,
        }
    return summary


__all__ = ["MeasurementRecorder", "load_recording", "recording_summary"]
