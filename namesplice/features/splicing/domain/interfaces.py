from abc import ABC, abstractmethod
from pathlib import Path

from .models import CompositorPolicy, SpliceInstruction


class ISpliceCompositor(ABC):
    """
    Contract for whatever mixes the name clip into the source.
    Abstracts away the underlying tool (FFmpeg) from the pipeline.
    """

    @abstractmethod
    def render(self,
               source: Path,
               clip: Path,
               instruction: SpliceInstruction,
               output: Path,
               policy: CompositorPolicy = CompositorPolicy.STRETCH) -> Path:
        """
        Writes the spliced asset to output and returns its path.

        Raises:
            FileNotFoundError: If source or clip does not exist.
            CompositionError: If the underlying process fails.
        """
        pass
