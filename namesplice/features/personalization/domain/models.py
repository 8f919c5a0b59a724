# File: namesplice/features/personalization/domain/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List

from namesplice.features.splicing.domain.models import SpliceInstruction
from namesplice.features.voice.domain.models import SynthesizedClip


@dataclass(frozen=True)
class ProspectRequest:
    prospect_id: str
    first_name: str


@dataclass(frozen=True)
class PersonalizationResult:
    """Everything an external compositor needs to produce one prospect's video."""
    prospect: ProspectRequest
    clip: SynthesizedClip
    instruction: SpliceInstruction

    status = "processing"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "nameAudioUrl": self.clip.audio_url,
            "spliceInstructions": self.instruction.to_payload(),
            "prospect": {
                "firstName": self.prospect.first_name,
                "prospectId": self.prospect.prospect_id,
                "status": self.status,
            },
        }


@dataclass(frozen=True)
class ProspectFailure:
    prospect: ProspectRequest
    error: Exception

    status = "failed"

    @property
    def retryable(self) -> bool:
        return bool(getattr(self.error, "retryable", False))

    def to_payload(self) -> Dict[str, Any]:
        reason = getattr(self.error, "reason", None) or str(self.error)
        return {
            "error": reason,
            "retryable": self.retryable,
            "prospect": {
                "firstName": self.prospect.first_name,
                "prospectId": self.prospect.prospect_id,
                "status": self.status,
            },
        }


@dataclass
class BatchOutcome:
    succeeded: List[PersonalizationResult] = field(default_factory=list)
    failed: List[ProspectFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "succeeded": [r.to_payload() for r in self.succeeded],
            "failed": [f.to_payload() for f in self.failed],
        }
