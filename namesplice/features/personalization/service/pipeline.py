# File: namesplice/features/personalization/service/pipeline.py
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional

from namesplice.core.config.settings import Settings, settings as default_settings
from namesplice.core.errors import NonRetryableReferenceError
from namesplice.core.retry import RetryPolicy, call_with_retry
from namesplice.features.detection.data.repository import SqlSpanRepository
from namesplice.features.detection.domain.interfaces import ISpanRepository
from namesplice.features.splicing.service.planner import plan_splice
from namesplice.features.storage.service.api import clip_storage_key, get_blob_store
from namesplice.features.voice.data.repository import SqlVoiceRepository
from namesplice.features.voice.domain.interfaces import IVoiceRepository
from namesplice.features.voice.domain.models import StyleParams
from namesplice.features.voice.domain.records import ProspectClipRecord
from namesplice.features.voice.service.api import get_voice_provider
from namesplice.features.voice.service.synthesizer import VoiceSynthesisEngine
from ..domain.models import BatchOutcome, PersonalizationResult, ProspectFailure, ProspectRequest

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class PersonalizationPipeline:
    """
    Per-prospect flow: load the project's span and voice, synthesize the
    name, store the clip, record it and plan the splice.

    Prospects share only read-only project state, so a batch runs them
    in parallel and one prospect's failure never affects another.
    """

    def __init__(self,
                 engine: VoiceSynthesisEngine,
                 span_repository: ISpanRepository,
                 voice_repository: IVoiceRepository,
                 retry_policy: Optional[RetryPolicy] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.engine = engine
        self.span_repository = span_repository
        self.voice_repository = voice_repository
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def personalize(self, project_id: str, prospect: ProspectRequest) -> PersonalizationResult:
        stored = self.span_repository.get(project_id)
        if stored is None:
            raise NonRetryableReferenceError(
                f"Project {project_id} has no detected placeholder. Run detection first.",
                {"project_id": project_id},
            )

        voice = self.voice_repository.get_profile(project_id)
        if voice is None:
            raise NonRetryableReferenceError(
                f"Project {project_id} has no voice profile.", {"project_id": project_id}
            )

        key = clip_storage_key(prospect.prospect_id, prospect.first_name)
        clip = call_with_retry(
            lambda: self.engine.synthesize(prospect.first_name, voice, StyleParams.for_names(), storage_key=key),
            policy=self.retry_policy,
            sleep=self._sleep,
            label=f"synthesis for prospect {prospect.prospect_id}",
        )

        instruction = plan_splice(stored.span, clip.duration_seconds)

        self.voice_repository.save_clip(ProspectClipRecord(
            prospect_id=prospect.prospect_id,
            project_id=project_id,
            text=clip.text,
            voice_id=voice.voice_id,
            duration_seconds=clip.duration_seconds,
            audio_url=clip.audio_url,
            storage_key=clip.storage_key,
        ))

        logger.info(
            f"Prospect {prospect.prospect_id}: clip {clip.duration_seconds:.2f}s "
            f"for gap {instruction.replacement_duration:.2f}s"
        )
        return PersonalizationResult(prospect=prospect, clip=clip, instruction=instruction)

    def personalize_batch(self,
                          project_id: str,
                          prospects: Iterable[ProspectRequest],
                          max_workers: int = DEFAULT_MAX_WORKERS) -> BatchOutcome:
        prospects = list(prospects)
        outcome = BatchOutcome()
        if not prospects:
            return outcome

        logger.info(f"Personalizing {len(prospects)} prospects for project {project_id}")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_prospect = {
                executor.submit(self.personalize, project_id, prospect): prospect
                for prospect in prospects
            }

            for future in as_completed(future_to_prospect):
                prospect = future_to_prospect[future]
                try:
                    outcome.succeeded.append(future.result())
                except Exception as e:
                    logger.error(f"Prospect {prospect.prospect_id} failed: {e}")
                    outcome.failed.append(ProspectFailure(prospect=prospect, error=e))

        # Completion order is arbitrary; report in request order
        order = {p.prospect_id: i for i, p in enumerate(prospects)}
        outcome.succeeded.sort(key=lambda r: order[r.prospect.prospect_id])
        outcome.failed.sort(key=lambda f: order[f.prospect.prospect_id])

        logger.info(f"Batch done: {len(outcome.succeeded)} succeeded, {len(outcome.failed)} failed")
        return outcome


def build_pipeline(config: Settings = default_settings) -> PersonalizationPipeline:
    engine = VoiceSynthesisEngine(
        get_voice_provider(config),
        blob_store=get_blob_store(config),
        config=config,
    )
    return PersonalizationPipeline(
        engine=engine,
        span_repository=SqlSpanRepository(),
        voice_repository=SqlVoiceRepository(),
        retry_policy=RetryPolicy(max_attempts=config.SYNTHESIS_MAX_ATTEMPTS),
    )


def personalize_prospect(project_id: str,
                         prospect_id: str,
                         first_name: str,
                         pipeline: Optional[PersonalizationPipeline] = None) -> PersonalizationResult:
    pipeline = pipeline or build_pipeline()
    return pipeline.personalize(project_id, ProspectRequest(prospect_id=prospect_id, first_name=first_name))


def personalize_batch(project_id: str,
                      prospects: Iterable[ProspectRequest],
                      max_workers: int = DEFAULT_MAX_WORKERS,
                      pipeline: Optional[PersonalizationPipeline] = None) -> BatchOutcome:
    pipeline = pipeline or build_pipeline()
    return pipeline.personalize_batch(project_id, prospects, max_workers=max_workers)
