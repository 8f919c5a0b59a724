from pathlib import Path
from typing import Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.media_probe import FFprobeDurationProbe
from ..data.ffmpeg_compositor import FFmpegSpliceCompositor
from ..domain.interfaces import ISpliceCompositor
from ..domain.models import CompositorPolicy, SpliceInstruction
from .planner import plan_splice

__all__ = ["plan_splice", "render_splice"]


def render_splice(source: Path,
                  clip: Path,
                  instruction: SpliceInstruction,
                  output: Path,
                  policy: CompositorPolicy = CompositorPolicy.STRETCH,
                  compositor: Optional[ISpliceCompositor] = None,
                  config: Settings = default_settings) -> Path:
    """
    Convenience driver: renders one spliced asset with the reference compositor.
    """
    compositor = compositor or FFmpegSpliceCompositor(config, probe=FFprobeDurationProbe(config))
    return compositor.render(source, clip, instruction, output, policy)
