from pathlib import Path
from typing import List, Sequence

from namesplice.core.config.settings import Settings, settings as default_settings
from ..domain.models import QUALITY_TIERS, QualityTier


def rendition_command(input_path: Path,
                      output_dir: Path,
                      tier: QualityTier,
                      config: Settings = default_settings) -> List[str]:
    """
    One ffmpeg invocation producing {stem}_{tier}.mp4, matching the
    naming used when variants are resolved for playback.
    """
    output = output_dir / f"{input_path.stem}_{tier.name}.mp4"
    return [
        config.FFMPEG_BINARY,
        "-y",
        "-i", str(input_path),
        "-c:v", "libx264",
        "-preset", "medium",
        "-crf", "23",
        "-vf", f"scale={tier.width}:{tier.height}",
        "-b:v", tier.bitrate,
        "-c:a", "aac",
        "-b:a", "128k",
        # moov atom first so playback can start before the download finishes
        "-movflags", "+faststart",
        "-pix_fmt", "yuv420p",
        str(output)
    ]


def rendition_commands(input_path: Path,
                       output_dir: Path,
                       tiers: Sequence[QualityTier] = QUALITY_TIERS,
                       config: Settings = default_settings) -> List[List[str]]:
    return [rendition_command(input_path, output_dir, tier, config) for tier in tiers]
