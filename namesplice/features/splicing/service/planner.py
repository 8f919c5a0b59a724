# File: namesplice/features/splicing/service/planner.py
from namesplice.core.errors import ValidationError
from namesplice.features.detection.domain.models import PlaceholderSpan
from ..domain.models import SpliceInstruction


def plan_splice(span: PlaceholderSpan, new_clip_duration: float) -> SpliceInstruction:
    """
    Computes splice points for replacing the placeholder with a clip.

    Pure: equal inputs always give equal instructions, and nothing is read
    from or written to the outside world.

    Raises:
        ValidationError: The span is inverted or the clip duration is negative.
    """
    if span.end <= span.start:
        raise ValidationError(
            f"Span end ({span.end}) must be after its start ({span.start}).",
            {"start": span.start, "end": span.end},
        )
    if new_clip_duration < 0:
        raise ValidationError(
            f"Clip duration cannot be negative: {new_clip_duration}",
            {"clip_duration": new_clip_duration},
        )

    return SpliceInstruction(
        before_end=span.start,
        after_start=span.end,
        replacement_duration=span.end - span.start,
        clip_duration=new_clip_duration,
    )
