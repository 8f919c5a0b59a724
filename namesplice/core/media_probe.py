# File: namesplice/core/media_probe.py

import logging
import subprocess
import tempfile
from pathlib import Path

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import NamespliceError

logger = logging.getLogger(__name__)


class FFprobeDurationProbe:
    """
    Reads the real duration of a media file with ffprobe.
    Synthesized clips never match a target length, so callers always measure.
    """

    def __init__(self, config: Settings = default_settings):
        self.binary = config.FFPROBE_BINARY

    def duration_of_file(self, path: Path) -> float:
        cmd = [
            self.binary,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path)
        ]
        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            stderr = getattr(e, "stderr", None) or str(e)
            logger.error(f"ffprobe failed for {path}: {stderr}")
            raise NamespliceError(f"Could not read media duration for {path.name}", {"stderr": stderr}) from e

        try:
            return float(result.stdout.strip())
        except ValueError as e:
            raise NamespliceError(f"Could not parse duration for {path.name}", {"stdout": result.stdout}) from e

    def duration_of_bytes(self, data: bytes, suffix: str = ".mp3") -> float:
        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_path = Path(tmp_dir) / f"probe{suffix}"
            tmp_path.write_bytes(data)
            return self.duration_of_file(tmp_path)
