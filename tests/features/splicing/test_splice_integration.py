import shutil
import subprocess

import pytest

from namesplice.core.config.settings import Settings
from namesplice.core.media_probe import FFprobeDurationProbe
from namesplice.features.detection.domain.models import PlaceholderSpan
from namesplice.features.splicing.domain.models import CompositorPolicy
from namesplice.features.splicing.service.api import render_splice
from namesplice.features.splicing.service.planner import plan_splice

pytestmark = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg/ffprobe not installed",
)


@pytest.fixture
def media(tmp_path):
    """
    Generates a 5s test video with a tone and a 0.8s 'name' clip.
    """
    source = tmp_path / "base-video.mp4"
    clip = tmp_path / "name.mp3"

    subprocess.run([
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", "testsrc=duration=5:size=320x240:rate=30",
        "-f", "lavfi", "-i", "sine=frequency=440:duration=5",
        "-c:v", "libx264", "-c:a", "aac", "-shortest",
        str(source)
    ], check=True, capture_output=True)
    subprocess.run([
        "ffmpeg", "-y", "-f", "lavfi", "-i", "sine=frequency=880:duration=0.8",
        str(clip)
    ], check=True, capture_output=True)
    return source, clip


@pytest.mark.parametrize("policy", list(CompositorPolicy))
def test_spliced_output_keeps_source_length(media, tmp_path, policy):
    """
    Integration Test:
    Replacing 2.0-2.5s with a 0.8s clip must not change the overall length,
    whatever fitting policy is used.
    """
    source, clip = media
    output = tmp_path / f"spliced_{policy.value}.mp4"
    probe = FFprobeDurationProbe(Settings())

    clip_duration = probe.duration_of_file(clip)
    instruction = plan_splice(PlaceholderSpan(2.0, 2.5), clip_duration)

    # EXECUTE SERVICE
    render_splice(source, clip, instruction, output, policy=policy)

    # ASSERT EXISTENCE + DURATION (0.15s margin for codec frame padding)
    assert output.exists()
    actual = probe.duration_of_file(output)
    print(f"✅ {policy.value}: {actual:.2f}s (source 5.00s)")
    assert 4.85 <= actual <= 5.15
