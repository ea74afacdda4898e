"""AI-assisted workflows that read and enrich the item store.

Each workflow moves Idle -> Pending -> Success/Failed -> Idle and owns its own
pending flag and result slot. Failures of any workflow land in one shared error
slot, which always holds the most recent failure only.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional
from pydantic import BaseModel
from renovation_planner import prompts
from renovation_planner.llm import EnrichmentError, GenerativeClient, ValidationError
from renovation_planner.models import GeneratedMaterial, ProductSuggestion, ShoppingItem
from renovation_planner.store import ItemStore, Observable

logger = logging.getLogger(__name__)


class Workflow(str, Enum):
    MATERIALS = "materials"
    ANALYSIS = "analysis"
    SUGGESTIONS = "suggestions"
    BRIEF = "brief"


_FAILURE_MESSAGES = {
    Workflow.MATERIALS: "Could not generate the material list. Please try again.",
    Workflow.ANALYSIS: "Could not generate the detailed analysis. Please try again.",
    Workflow.SUGGESTIONS: (
        "Could not generate shopping suggestions. "
        "Make sure the list has items and try again."
    ),
    Workflow.BRIEF: "Could not generate the operational brief. Please try again.",
}


class WorkflowState(BaseModel):
    pending: bool = False
    result: Any = None


class EnrichmentClient(Observable):
    def __init__(self, store: ItemStore, llm: GenerativeClient):
        super().__init__()
        self.store = store
        self.llm = llm
        self.config = llm.config
        self.states: dict[Workflow, WorkflowState] = {w: WorkflowState() for w in Workflow}
        self.error: Optional[str] = None
        self.error_source: Optional[Workflow] = None
        self.failure: Optional[EnrichmentError] = None

    def is_pending(self, workflow: Workflow) -> bool:
        return self.states[workflow].pending

    @property
    def generated_items(self) -> tuple[ShoppingItem, ...]:
        """The batch appended by the last successful material generation."""
        return self.states[Workflow.MATERIALS].result or ()

    @property
    def analysis(self) -> Optional[str]:
        return self.states[Workflow.ANALYSIS].result

    @property
    def suggestions(self) -> tuple[ProductSuggestion, ...]:
        return self.states[Workflow.SUGGESTIONS].result or ()

    @property
    def brief(self) -> Optional[str]:
        return self.states[Workflow.BRIEF].result

    async def generate_materials(self, description: str) -> bool:
        description = description.strip()
        if not description:
            return self._reject(
                Workflow.MATERIALS,
                "Please enter a description of the apartment to generate a material list.",
            )
        prompt = prompts.materials_prompt(description, self.config)

        async def run() -> tuple[ShoppingItem, ...]:
            materials = await self.llm.generate_list(prompt, GeneratedMaterial)
            drafts = [m.to_draft() for m in materials]
            batch = self.store.add_items(drafts)
            logger.info("Appended %d generated items to the shopping list", len(batch))
            return batch

        return await self._run(Workflow.MATERIALS, run)

    async def generate_analysis(self, description: str) -> bool:
        description = description.strip()
        if not description:
            return self._reject(
                Workflow.ANALYSIS,
                "Please enter a project description to generate a detailed analysis.",
            )
        prompt = prompts.analysis_prompt(description, self.config)

        async def run() -> str:
            return await self.llm.generate(prompt)

        return await self._run(Workflow.ANALYSIS, run)

    async def generate_suggestions(self) -> bool:
        items = self.store.all_items()
        if not items:
            return self._reject(
                Workflow.SUGGESTIONS,
                "Your shopping list is empty. Add items before generating product suggestions.",
            )
        prompt = prompts.suggestions_prompt(items, self.config)

        async def run() -> tuple[ProductSuggestion, ...]:
            suggestions = await self.llm.generate_list(prompt, ProductSuggestion)
            logger.info("Received %d product suggestions", len(suggestions))
            return tuple(suggestions)

        return await self._run(Workflow.SUGGESTIONS, run)

    async def generate_brief(self) -> bool:
        analysis = self.analysis
        items = self.store.all_items()
        suggestions = self.suggestions
        if not analysis and not items and not suggestions:
            return self._reject(
                Workflow.BRIEF,
                "Not enough data for an operational brief. Generate a detailed analysis, "
                "a material list or shopping suggestions first.",
            )
        prompt = prompts.brief_prompt(analysis, items, suggestions)

        async def run() -> str:
            return await self.llm.generate(prompt)

        return await self._run(Workflow.BRIEF, run)

    async def _run(self, workflow: Workflow, call: Callable[[], Awaitable[Any]]) -> bool:
        state = self.states[workflow]
        if state.pending:
            logger.warning("%s generation already in progress, ignoring new request", workflow.value)
            return False

        state.pending = True
        state.result = None
        self._set_error(None, None)
        self._notify()
        try:
            state.result = await call()
        except EnrichmentError as e:
            logger.error("%s generation failed: %s", workflow.value, e)
            self._set_error(workflow, e)
            return False
        finally:
            state.pending = False
            self._notify()
        return True

    def _reject(self, workflow: Workflow, message: str) -> bool:
        logger.warning("Rejected %s request: %s", workflow.value, message)
        self._set_error(workflow, ValidationError(message))
        self._notify()
        return False

    def _set_error(self, workflow: Optional[Workflow], failure: Optional[EnrichmentError]) -> None:
        self.failure = failure
        self.error_source = workflow
        if failure is None:
            self.error = None
        elif isinstance(failure, ValidationError):
            self.error = str(failure)
        else:
            self.error = f"{_FAILURE_MESSAGES[workflow]} Details: {failure}"
