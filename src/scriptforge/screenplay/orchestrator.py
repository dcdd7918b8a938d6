"""LangGraph-powered orchestration of sectioned screenplay generation.

The orchestrator owns the ordered :class:`SectionState` list for one run and
drives the five fixed sections strictly in ascending order. Each section is a
node in a linear ``StateGraph``; the resolved text of a section is threaded to
the next node as continuity context. A section that exhausts its retry budget
is marked ``error`` and the run carries on with an empty context, so a run
always ends with every section in a terminal state. Every status transition
is published to subscribed listeners as a :class:`SectionEvent`.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence

from langgraph.graph import END, START, StateGraph

from ..graph.states import ScreenplayRunState
from ..llm.usage import UsageTracker
from .section_generator import SectionGenerationError, SectionGenerator
from .state import SECTION_SPECS, Brief, SectionEvent, SectionSpec, SectionState, SectionStatus

logger = logging.getLogger(__name__)

__all__ = ["GenerationOrchestrator", "SectionListener"]

SectionListener = Callable[[SectionEvent], None]


class GenerationOrchestrator:
    """Drive every section of a screenplay run to a terminal status.

    A credential table attached to the generator is validated against the
    section list here, so a mismatch fails before any section starts.
    """

    def __init__(
        self,
        generator: SectionGenerator,
        *,
        specs: Sequence[SectionSpec] = SECTION_SPECS,
        listeners: Iterable[SectionListener] = (),
    ) -> None:
        ordinals = [spec.ordinal for spec in specs]
        if not ordinals or ordinals != list(range(1, len(ordinals) + 1)):
            raise ValueError(f"Section ordinals must run 1..n in order, got {ordinals}")
        if generator.credentials is not None:
            generator.credentials.validate(len(ordinals))
        self.generator = generator
        self._specs = tuple(specs)
        self._listeners: list[SectionListener] = list(listeners)
        self._brief: Optional[Brief] = None
        self._sections: list[SectionState] = []
        self._graph = self._build_graph()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def subscribe(self, listener: SectionListener) -> None:
        self._listeners.append(listener)

    @property
    def specs(self) -> tuple[SectionSpec, ...]:
        return self._specs

    @property
    def brief(self) -> Optional[Brief]:
        return self._brief

    @property
    def sections(self) -> tuple[SectionState, ...]:
        return tuple(self._sections)

    @property
    def current_ordinal(self) -> Optional[int]:
        for section in self._sections:
            if section.status is SectionStatus.GENERATING:
                return section.ordinal
        return None

    @property
    def usage(self) -> Optional[UsageTracker]:
        return self.generator.usage

    def run(self, brief: Brief) -> tuple[SectionState, ...]:
        """Generate every section for ``brief`` and return the final states."""

        self.reset()
        self._brief = brief
        self._sections = [SectionState.pending(spec) for spec in self._specs]
        logger.info("Starting screenplay run for %r (%d sections)", brief.title, len(self._specs))

        final_state = self._graph.invoke({"previous_content": "", "resolved": [], "failed": []})
        logger.info(
            "Run finished: %d completed, %d failed",
            len(final_state.get("resolved", [])),
            len(final_state.get("failed", [])),
        )
        return self.sections

    def retry_section(self, ordinal: int) -> SectionState:
        """Re-attempt one failed section with the context it would have received."""

        if self._brief is None or not self._sections:
            raise ValueError("No run in progress; call run() first.")
        index = self._index_for(ordinal)
        section = self._sections[index]
        if section.status is not SectionStatus.ERROR:
            raise ValueError(f"Section {ordinal} is {section.status.value}; only failed sections can be retried.")
        return self._advance(index, self._previous_content_for(index))

    def retry_failed(self) -> tuple[SectionState, ...]:
        for section in list(self._sections):
            if section.status is SectionStatus.ERROR:
                self.retry_section(section.ordinal)
        return self.sections

    def reset(self) -> None:
        """Discard the brief, every section state and usage totals."""

        self._brief = None
        self._sections = []
        if self.generator.usage is not None:
            self.generator.usage.clear()

    # ------------------------------------------------------------------
    # LangGraph wiring
    # ------------------------------------------------------------------
    def _build_graph(self):
        graph = StateGraph(ScreenplayRunState)
        names = [f"section_{spec.ordinal}" for spec in self._specs]
        for index, name in enumerate(names):
            graph.add_node(name, self._section_node(index))

        graph.add_edge(START, names[0])
        for current, following in zip(names, names[1:]):
            graph.add_edge(current, following)
        graph.add_edge(names[-1], END)
        return graph.compile()

    def _section_node(self, index: int) -> Callable[[ScreenplayRunState], ScreenplayRunState]:
        def node(state: ScreenplayRunState) -> ScreenplayRunState:
            section = self._advance(index, state.get("previous_content", ""))
            if section.status is SectionStatus.COMPLETED:
                return {
                    "previous_content": section.content,
                    "resolved": [*state.get("resolved", []), section.ordinal],
                }
            return {
                "previous_content": "",
                "failed": [*state.get("failed", []), section.ordinal],
            }

        return node

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def _advance(self, index: int, previous_content: str) -> SectionState:
        if index > 0 and not self._sections[index - 1].status.is_terminal:
            raise RuntimeError(
                f"Section {index + 1} requested before section {index} reached a terminal status"
            )
        if self._brief is None:
            raise RuntimeError("No brief set; call run() first.")
        section = self._sections[index]
        self._transition(section, SectionStatus.GENERATING)
        try:
            draft = self.generator.resolve(self._brief, self._specs[index], previous_content, index)
        except SectionGenerationError as exc:
            logger.error("Section %d failed: %s", section.ordinal, exc.last_error)
            section.content = ""
            section.attempts = exc.attempts
            section.error = str(exc.last_error)
            self._transition(section, SectionStatus.ERROR)
        else:
            section.content = draft.text
            section.attempts = draft.attempts
            section.error = None
            self._transition(section, SectionStatus.COMPLETED)
        return section

    def _transition(self, section: SectionState, status: SectionStatus) -> None:
        event = SectionEvent(
            ordinal=section.ordinal,
            previous_status=section.status,
            status=status,
            error=section.error if status is SectionStatus.ERROR else None,
        )
        section.status = status
        logger.debug("Section %d: %s -> %s", section.ordinal, event.previous_status.value, status.value)
        for listener in self._listeners:
            listener(event)

    def _previous_content_for(self, index: int) -> str:
        if index == 0:
            return ""
        previous = self._sections[index - 1]
        return previous.content if previous.status is SectionStatus.COMPLETED else ""

    def _index_for(self, ordinal: int) -> int:
        if not 1 <= ordinal <= len(self._specs):
            raise ValueError(f"Unknown section ordinal {ordinal}")
        return ordinal - 1
