"""
Generation pipeline controller.

Sequences the content stages (outline -> story -> review script, plus SEO and
media prompts), checks each stage's preconditions, tracks busy/error state and
appends results one unit at a time so a front-end can render progress.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional

from bookcast.agents.media_agent import MediaAgent
from bookcast.agents.outline_agent import OutlineAgent
from bookcast.agents.reviewer_agent import ReviewerAgent
from bookcast.agents.seo_agent import SEOAgent
from bookcast.agents.writer_agent import WriterAgent
from bookcast.config import Settings, get_settings
from bookcast.core.models import OutlineItem, ScriptBlock, SEOResult, StoryBlock
from bookcast.utils.errors import (
    BookcastError,
    InputValidationError,
    PreconditionNotMetError,
    ResponseDecodeError,
    StageBusyError,
)
from bookcast.utils.key_pool import has_credentials
from bookcast.utils.llm_client import ClientFactory, provider_for_model
from bookcast.utils.logger import get_logger, log_error
from bookcast.utils.text import chunk_text

logger = get_logger(__name__)

STAGES = ("outline", "story", "script", "seo", "prompts")

UPLOAD_PART_LABELS = {"vi": "Phần", "en": "Part"}


class StageStatus(str, Enum):
    """Lifecycle of one stage."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PipelineInputs:
    """What the user typed: the book, generation settings and raw key text."""
    book_title: str = ""
    book_idea: str = ""
    chapters_count: int = 12
    duration_min: int = 240
    language: str = "vi"
    frame_ratio: str = "9:16"
    model: str = "gemini-3-pro-preview"
    gemini_keys: str = ""
    openai_keys: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineInputs":
        return cls(
            chapters_count=settings.default_chapters,
            duration_min=settings.default_duration_min,
            language=settings.default_language,
            frame_ratio=settings.default_frame_ratio,
            model=settings.default_model
        )

    @property
    def provider(self) -> str:
        return provider_for_model(self.model)

    def keys_for(self, provider: str) -> str:
        return self.openai_keys if provider == "openai" else self.gemini_keys


@dataclass
class PipelineRunState:
    """Everything a run has produced so far, plus per-stage busy flags and one error slot.

    Only the owning ``GenerationPipeline`` writes to this object.
    """
    outline: List[OutlineItem] = field(default_factory=list)
    story_blocks: List[StoryBlock] = field(default_factory=list)
    script_blocks: List[ScriptBlock] = field(default_factory=list)
    seo: Optional[SEOResult] = None
    video_prompts: List[str] = field(default_factory=list)
    thumbnail_ideas: List[str] = field(default_factory=list)
    story_uploaded: bool = False
    busy: Dict[str, bool] = field(default_factory=lambda: {stage: False for stage in STAGES})
    status: Dict[str, StageStatus] = field(
        default_factory=lambda: {stage: StageStatus.IDLE for stage in STAGES}
    )
    error: Optional[str] = None

    def busy_stage(self) -> Optional[str]:
        for stage in STAGES:
            if self.busy[stage]:
                return stage
        return None

    @property
    def script_chars(self) -> int:
        return sum(block.chars for block in self.script_blocks)


class GenerationPipeline:
    """Runs the content stages for one book against one ``PipelineRunState``.

    At most one stage runs at a time per pipeline; triggering a stage while
    another is busy is refused with ``StageBusyError``. Every ``run_*`` method
    returns ``True`` on success and ``False`` on failure, with the
    user-facing message left in ``state.error``.
    """

    def __init__(
        self,
        inputs: Optional[PipelineInputs] = None,
        settings: Optional[Settings] = None,
        client_factory: Optional[ClientFactory] = None,
        on_update: Optional[Callable[[PipelineRunState], None]] = None
    ):
        self.settings = settings or get_settings()
        self.inputs = inputs or PipelineInputs.from_settings(self.settings)
        self.state = PipelineRunState()
        self.on_update = on_update

        self.outline_agent = OutlineAgent(client_factory)
        self.writer_agent = WriterAgent(client_factory)
        self.reviewer_agent = ReviewerAgent(client_factory)
        self.seo_agent = SEOAgent(client_factory)
        self.media_agent = MediaAgent(client_factory)

    @property
    def target_chars(self) -> int:
        """Character target for the whole review script: duration x chars per minute."""
        return self.inputs.duration_min * self.settings.chars_per_minute

    # State helpers

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update(self.state)

    def _report(self, message: str) -> None:
        self.state.error = message
        self._notify()

    def _validate_inputs(self) -> None:
        if not self.inputs.book_title.strip():
            raise InputValidationError("Please enter the book title first.")
        provider = self.inputs.provider
        if provider == "openai" and not has_credentials(self.inputs.openai_keys, "openai"):
            raise InputValidationError("Please enter an OpenAI API key to use ChatGPT models.")

    async def _run_stage(
        self,
        stage: str,
        body: Callable[[], Awaitable[None]],
        precondition: Optional[Callable[[], None]] = None
    ) -> bool:
        """Idle -> Running -> Succeeded | Failed, with the checks that guard Running."""
        try:
            busy = self.state.busy_stage()
            if busy is not None:
                raise StageBusyError(busy)
            self._validate_inputs()
            if precondition is not None:
                precondition()
        except BookcastError as e:
            logger.warning(f"Stage '{stage}' refused: {e}")
            self._report(str(e))
            return False

        self.state.error = None
        self.state.busy[stage] = True
        self.state.status[stage] = StageStatus.RUNNING
        self._notify()
        start_time = time.time()

        try:
            await body()
            self.state.status[stage] = StageStatus.SUCCEEDED
        except Exception as e:
            log_error(e, context={"book_title": self.inputs.book_title}, stage=stage)
            self.state.status[stage] = StageStatus.FAILED
            self.state.error = f"Error generating {stage}. Please try again. Error: {e}"
            return False
        finally:
            self.state.busy[stage] = False
            self._notify()

        logger.info(f"Stage '{stage}' completed in {time.time() - start_time:.1f}s")
        return True

    # Stages

    async def run_outline(self) -> bool:
        """Generate the outline; replaces it and clears story and script state."""
        inputs = self.inputs
        provider = inputs.provider

        async def body():
            payloads = await self.outline_agent.generate_outline(
                inputs.book_title,
                inputs.model,
                inputs.keys_for(provider),
                provider,
                book_idea=inputs.book_idea,
                chapters_count=inputs.chapters_count,
                duration_min=inputs.duration_min,
                language=inputs.language
            )
            if not payloads:
                raise ResponseDecodeError("the AI returned an empty outline")
            self.state.outline = [payload.to_item(index) for index, payload in enumerate(payloads)]
            self.state.story_blocks = []
            self.state.script_blocks = []
            self.state.story_uploaded = False

        return await self._run_stage("outline", body)

    async def run_story(self) -> bool:
        """Write one story block per outline item, in outline order."""
        inputs = self.inputs
        provider = inputs.provider

        def precondition():
            if not self.state.outline:
                raise PreconditionNotMetError(
                    "An outline is required before writing the story. Or upload a story file."
                )

        async def body():
            self.state.story_blocks = []
            self.state.story_uploaded = False
            self._notify()
            for item in list(self.state.outline):
                content = await self.writer_agent.generate_story_block(
                    item,
                    inputs.book_title,
                    inputs.model,
                    inputs.keys_for(provider),
                    provider,
                    book_idea=inputs.book_idea,
                    language=inputs.language
                )
                self.state.story_blocks.append(
                    StoryBlock(index=item.index, title=item.title, content=content)
                )
                self._notify()

        return await self._run_stage("story", body, precondition)

    async def run_script(self) -> bool:
        """Write one review script block per story block, in story order."""
        inputs = self.inputs
        provider = inputs.provider

        def precondition():
            if not self.state.story_blocks:
                raise PreconditionNotMetError(
                    "There is no story content yet. Write the story or upload a story file first."
                )

        async def body():
            self.state.script_blocks = []
            self._notify()
            blocks = list(self.state.story_blocks)
            block_target = max(1, self.target_chars // len(blocks))
            for block in blocks:
                text = await self.reviewer_agent.generate_review_block(
                    block.content,
                    block.title,
                    inputs.book_title,
                    inputs.model,
                    inputs.keys_for(provider),
                    provider,
                    language=inputs.language,
                    target_chars=block_target
                )
                self.state.script_blocks.append(
                    ScriptBlock(index=block.index, chapter=block.title, text=text)
                )
                self._notify()

        return await self._run_stage("script", body, precondition)

    async def run_seo(self) -> bool:
        """Generate SEO metadata; replaced wholesale."""
        inputs = self.inputs
        provider = inputs.provider

        async def body():
            payload = await self.seo_agent.generate_seo(
                inputs.book_title,
                inputs.model,
                inputs.keys_for(provider),
                provider,
                duration_min=inputs.duration_min,
                language=inputs.language
            )
            self.state.seo = payload.to_result()

        return await self._run_stage("seo", body)

    async def run_prompts(self) -> bool:
        """Generate video prompts and thumbnail ideas concurrently; commit only if both succeed."""
        inputs = self.inputs
        provider = inputs.provider

        async def body():
            results = await asyncio.gather(
                self.media_agent.generate_video_prompts(
                    inputs.book_title,
                    inputs.model,
                    inputs.keys_for(provider),
                    provider,
                    frame_ratio=inputs.frame_ratio
                ),
                self.media_agent.generate_thumbnail_ideas(
                    inputs.book_title,
                    inputs.model,
                    inputs.keys_for(provider),
                    provider,
                    duration_min=inputs.duration_min,
                    language=inputs.language
                ),
                return_exceptions=True
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            video_prompts, thumbnail_ideas = results
            self.state.video_prompts = list(video_prompts)
            self.state.thumbnail_ideas = list(thumbnail_ideas)

        return await self._run_stage("prompts", body)

    # Upload substitution

    def load_uploaded_story(self, text: str, max_chars: Optional[int] = None) -> int:
        """
        Replace outline, story and script state with story blocks chunked from ``text``.

        Returns:
            Number of story blocks created (0 when the upload was refused or empty)
        """
        busy = self.state.busy_stage()
        if busy is not None:
            self._report(str(StageBusyError(busy)))
            return 0

        chunks = chunk_text(text, max_chars or self.settings.upload_chunk_chars)
        if not chunks:
            self._report("The uploaded file contains no text.")
            return 0

        label = UPLOAD_PART_LABELS.get(self.inputs.language, UPLOAD_PART_LABELS["en"])
        self.state.story_blocks = [
            StoryBlock(index=number, title=f"{label} {number} (Upload)", content=chunk)
            for number, chunk in enumerate(chunks, start=1)
        ]
        self.state.outline = []
        self.state.script_blocks = []
        self.state.story_uploaded = True
        self.state.error = None
        logger.info(f"Uploaded story split into {len(chunks)} parts")
        self._notify()
        return len(chunks)
