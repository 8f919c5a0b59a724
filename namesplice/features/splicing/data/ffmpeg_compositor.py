import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import CompositionError
from ..domain.interfaces import ISpliceCompositor
from ..domain.models import CompositorPolicy, SpliceInstruction

logger = logging.getLogger(__name__)

# atempo accepts 0.5-2.0 per stage; larger ratios are chained
ATEMPO_MIN = 0.5
ATEMPO_MAX = 2.0

CROSSFADE_SECONDS = 0.03


def atempo_chain(ratio: float) -> List[str]:
    """
    Splits a tempo ratio into atempo stages that each stay within [0.5, 2.0].
    e.g. 3.0 -> ["atempo=2.0", "atempo=1.5000"]
    """
    if ratio <= 0:
        raise ValueError(f"Tempo ratio must be positive, got {ratio}")

    stages = []
    tempo = ratio
    while tempo > ATEMPO_MAX:
        stages.append(f"atempo={ATEMPO_MAX}")
        tempo /= ATEMPO_MAX
    while tempo < ATEMPO_MIN:
        stages.append(f"atempo={ATEMPO_MIN}")
        tempo /= ATEMPO_MIN
    stages.append(f"atempo={tempo:.4f}")
    return stages


def _fit_filter(instruction: SpliceInstruction, policy: CompositorPolicy, overlap: float) -> str:
    gap = instruction.replacement_duration

    if policy == CompositorPolicy.STRETCH:
        if instruction.clip_duration <= 0:
            return f"apad,atrim=0:{gap:.3f}"
        # Pad + trim after the tempo change absorbs rounding in the last stage
        stages = atempo_chain(instruction.tempo_ratio)
        return ",".join(stages + ["apad", f"atrim=0:{gap:.3f}"])

    if policy == CompositorPolicy.PAD_SILENCE:
        return f"apad,atrim=0:{gap:.3f}"

    if policy == CompositorPolicy.CROSSFADE_TRIM:
        # Crossfades overlap the neighbours, so the clip is lengthened by the overlap
        return f"apad,atrim=0:{gap + overlap:.3f}"

    raise ValueError(f"Unknown compositor policy: {policy}")


def build_filter_graph(instruction: SpliceInstruction,
                       policy: CompositorPolicy,
                       source_duration: Optional[float] = None) -> str:
    """
    Builds the filter_complex that replaces [0:a] between before_end and
    after_start with the fitted [1:a]. The result is labelled [aout].
    """
    has_pre = instruction.before_end > 0
    has_post = source_duration is None or instruction.after_start < source_duration

    fade = 0.0
    if policy == CompositorPolicy.CROSSFADE_TRIM:
        fade = min(CROSSFADE_SECONDS, instruction.replacement_duration / 2)
        if has_pre:
            fade = min(fade, instruction.before_end)

    segments = (["[pre]"] if has_pre else []) + ["[name]"] + (["[post]"] if has_post else [])
    overlap = fade * (len(segments) - 1)

    filters = []
    if has_pre:
        filters.append(f"[0:a]atrim=0:{instruction.before_end:.3f},asetpts=PTS-STARTPTS[pre]")
    filters.append(f"[1:a]{_fit_filter(instruction, policy, overlap)},asetpts=PTS-STARTPTS[name]")
    if has_post:
        filters.append(f"[0:a]atrim=start={instruction.after_start:.3f},asetpts=PTS-STARTPTS[post]")

    if policy == CompositorPolicy.CROSSFADE_TRIM and fade > 0 and len(segments) > 1:
        current = segments[0]
        for i, nxt in enumerate(segments[1:]):
            label = "[aout]" if i == len(segments) - 2 else f"[xf{i}]"
            filters.append(f"{current}{nxt}acrossfade=d={fade:.3f}{label}")
            current = label
    elif len(segments) > 1:
        filters.append(f"{''.join(segments)}concat=n={len(segments)}:v=0:a=1[aout]")
    else:
        filters.append("[name]anull[aout]")

    return ";".join(filters)


class FFmpegSpliceCompositor(ISpliceCompositor):
    """
    Reference compositor built on FFmpeg.
    Video is copied untouched; only the audio track is re-encoded.
    """

    def __init__(self, config: Settings = default_settings, probe=None):
        self.binary = config.FFMPEG_BINARY
        self.probe = probe

    def build_command(self,
                      source: Path,
                      clip: Path,
                      instruction: SpliceInstruction,
                      output: Path,
                      policy: CompositorPolicy = CompositorPolicy.STRETCH,
                      source_duration: Optional[float] = None) -> List[str]:
        # -y: Overwrite output files without asking
        # 0:v?: Audio-only sources have no video stream to map
        # -c:v copy: The splice never touches frames
        return [
            self.binary,
            "-y",
            "-i", str(source),
            "-i", str(clip),
            "-filter_complex", build_filter_graph(instruction, policy, source_duration),
            "-map", "0:v?",
            "-map", "[aout]",
            "-c:v", "copy",
            "-c:a", "aac",
            "-b:a", "128k",
            str(output)
        ]

    def render(self,
               source: Path,
               clip: Path,
               instruction: SpliceInstruction,
               output: Path,
               policy: CompositorPolicy = CompositorPolicy.STRETCH) -> Path:
        for path in (source, clip):
            if not path.exists():
                raise FileNotFoundError(f"Media file not found: {path}")

        output.parent.mkdir(parents=True, exist_ok=True)
        source_duration = self.probe.duration_of_file(source) if self.probe else None
        cmd = self.build_command(source, clip, instruction, output, policy, source_duration)

        logger.info(f"Executing FFmpeg splice ({policy.value}): {' '.join(cmd)}")

        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown FFmpeg error"
            logger.error(f"FFmpeg splice failed. STDERR: {error_message}")
            raise CompositionError("Audio splicing failed.", {"stderr": error_message}) from e
        except FileNotFoundError as e:
            raise CompositionError(f"FFmpeg binary not found: {self.binary}") from e

        return output
