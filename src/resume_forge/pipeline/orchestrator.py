"""Generation pipeline: prompt -> model -> validated document -> HTML -> record."""

from __future__ import annotations

import logging
import time

from resume_forge.events.models import EventSink, PipelineEvent, emit
from resume_forge.models.document import DocumentKind
from resume_forge.models.payload import CoverLetterPayload, ParsePayload, ResumePayload
from resume_forge.models.records import GenerationRequest, GenerationResult
from resume_forge.pipeline.confidence import ExtractionContext, score
from resume_forge.pipeline.invoker import ModelInvoker
from resume_forge.pipeline.validator import validate
from resume_forge.prompts.registry import PromptRegistry, default_registry
from resume_forge.render import render
from resume_forge.storage import DocumentStore

logger = logging.getLogger(__name__)


class GenerationPipeline:
    """Runs one generation request end to end.

    Holds only read-only collaborators, so a single instance can serve any
    number of concurrent requests.
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        registry: PromptRegistry | None = None,
        store: DocumentStore | None = None,
        *,
        events: EventSink | None = None,
    ):
        self.invoker = invoker
        self.registry = registry or default_registry()
        self.store = store
        self.events = events

    async def run(self, request: GenerationRequest) -> GenerationResult:
        """Run the pipeline for ``request``.

        Raises AllProvidersUnavailable when no provider answered. Malformed
        model output never raises; it is reported through ``was_repaired``.
        """
        start = time.monotonic()
        template = self.registry.get(request.kind, request.use_repair_variant)
        prompt = self.registry.build_prompt(template, request.payload)
        logger.debug(
            "Request %s: %s template v%s (%d chars)",
            request.request_id,
            request.kind.value,
            template.version,
            len(prompt),
        )

        invocation = await self.invoker.invoke(prompt, template, request_id=request.request_id)
        document = validate(invocation.raw_text, template.target_schema)
        if document.was_repaired:
            await self._emit(request, "output_repaired", invocation.provider_name, {
                "missing_fields": sorted(document.missing_fields),
                "parse_failed": document.parse_failed,
            })

        confidence = None
        if request.kind is DocumentKind.PARSED_RESUME:
            context = ExtractionContext(
                ocr_used=request.payload.ocr_used,
                missing_fields=document.missing_fields,
            )
            confidence = score(document, context, template.target_schema)

        artifact = render(document)
        record_id = None
        if self.store is not None:
            record_id = await self.store.create_record(artifact, document)

        elapsed = time.monotonic() - start
        await self._emit(request, "document_created", invocation.provider_name, {
            "record_id": record_id,
            "template_version": template.version,
            "was_repaired": document.was_repaired,
        })
        logger.info(
            "Created %s via %s in %.1fs (repaired=%s)",
            request.kind.value,
            invocation.provider_name,
            elapsed,
            document.was_repaired,
        )
        return GenerationResult(
            document=document,
            artifact=artifact,
            attempts=invocation.attempts,
            confidence=confidence,
            record_id=record_id,
            elapsed_seconds=elapsed,
            metadata={
                "provider": invocation.provider_name,
                "used_fallback": invocation.used_fallback,
                "template_version": template.version,
                "request_id": request.request_id,
            },
        )

    async def generate_resume(self, payload: ResumePayload) -> GenerationResult:
        return await self.run(GenerationRequest(kind=DocumentKind.RESUME, payload=payload))

    async def write_cover_letter(self, payload: CoverLetterPayload) -> GenerationResult:
        return await self.run(GenerationRequest(kind=DocumentKind.COVER_LETTER, payload=payload))

    async def parse_resume(self, payload: ParsePayload) -> GenerationResult:
        """Extract structured fields; OCR text gets the error-correcting prompt."""
        return await self.run(
            GenerationRequest(
                kind=DocumentKind.PARSED_RESUME,
                payload=payload,
                use_repair_variant=payload.ocr_used,
            )
        )

    async def _emit(self, request: GenerationRequest, name: str, provider: str | None, detail: dict) -> None:
        await emit(
            self.events,
            PipelineEvent(
                event=name,
                request_id=request.request_id,
                document_kind=request.kind.value,
                provider=provider,
                detail=detail,
            ),
        )
