import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import CompositionError
from ..data.renditions import rendition_commands
from ..domain.models import QUALITY_TIERS, QualityTier
from .bandwidth import BandwidthService
from .selector import best_available_variant, resolve_playable_variant, resolve_variant

logger = logging.getLogger(__name__)

__all__ = [
    "BandwidthService",
    "resolve_variant",
    "resolve_playable_variant",
    "best_available_variant",
    "render_variants",
]


def render_variants(input_path: Path,
                    output_dir: Optional[Path] = None,
                    tiers: Sequence[QualityTier] = QUALITY_TIERS,
                    config: Settings = default_settings) -> List[Path]:
    """
    Renders every quality tier of a personalized video next to it (or into output_dir).
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Media file not found: {input_path}")

    target_dir = output_dir or input_path.parent
    target_dir.mkdir(parents=True, exist_ok=True)

    outputs = []
    for cmd in rendition_commands(input_path, target_dir, tiers, config):
        logger.info(f"Executing FFmpeg rendition: {' '.join(cmd)}")
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown FFmpeg error"
            logger.error(f"FFmpeg rendition failed. STDERR: {error_message}")
            raise CompositionError("Variant rendering failed.", {"stderr": error_message}) from e
        outputs.append(Path(cmd[-1]))

    return outputs
