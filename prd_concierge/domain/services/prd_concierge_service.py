"""
PRD Concierge Service - turns a multi-turn conversation into a PRD.

Per request: ingest -> extract & merge -> (optional) classify -> score ->
either continue the conversation or assemble the document.

Every request works on a deep copy of its session and commits it back to
the store only on success, so a failed model call or a rejected document
leaves the session exactly as it was.
"""

import asyncio
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from prd_concierge.core.config import Settings
from prd_concierge.core.errors import CompletionRequestFailed, DocumentValidationFailed
from prd_concierge.core.logging import LogContext
from prd_concierge.domain.schemas.output import (
    DebugInfo,
    GeneratePRDOutput,
    OutputContent,
    OutputType,
)
from prd_concierge.domain.schemas.session import (
    Complexity,
    ProjectType,
    Session,
    SessionStatus,
    TurnRole,
)
from prd_concierge.domain.services import context_extractor, readiness_scorer
from prd_concierge.domain.services.clarification_generator import generate_questions
from prd_concierge.domain.services.persona_loader import PersonaLoader
from prd_concierge.domain.services.prd_builder import PRDBuilder
from prd_concierge.domain.services.readiness_scorer import ReadinessAnalysis
from prd_concierge.domain.services.session_store import SessionStore
from prd_concierge.llm.client import LLMClient
from prd_concierge.llm.dispatcher import CompletionDispatcher
from prd_concierge.llm.output_parser import IntentClassification, classify_by_keywords

logger = logging.getLogger(__name__)

DETAIL_SUGGESTION = "Please describe your project in more detail"


@dataclass
class IntentAnalysis:
    """Classification plus the keyword-derived hints for one input."""
    project_type: ProjectType
    confidence: int
    detected_features: List[str] = field(default_factory=list)
    complexity_estimate: Complexity = Complexity.MEDIUM
    clarifications_needed: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    reasoning: str = ""


class PRDConciergeService:
    """
    Orchestrates sessions, extraction, scoring, replies and PRD assembly.

    Requests for the same session id are serialised with a per-session
    asyncio.Lock; requests for different sessions run concurrently.
    """

    def __init__(
        self,
        store: SessionStore,
        llm_client: LLMClient,
        prd_builder: Optional[PRDBuilder] = None,
        persona_loader: Optional[PersonaLoader] = None,
        min_confidence_for_prd: int = readiness_scorer.SCORE_GATE,
        project_type_confidence_threshold: int = 70,
        sweep_interval_seconds: float = 600,
    ):
        self._store = store
        self._llm = llm_client
        self._builder = prd_builder or PRDBuilder()
        self._personas = persona_loader or PersonaLoader()
        self._min_confidence_for_prd = min_confidence_for_prd
        self._type_threshold = project_type_confidence_threshold
        self._sweep_interval = sweep_interval_seconds
        self._session_locks: Dict[str, asyncio.Lock] = {}
        self._sweeper: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, settings: Settings, host: Any = None) -> "PRDConciergeService":
        """Wire the standard components from settings and a host object."""
        dispatcher = CompletionDispatcher.for_host(
            host,
            openai_api_key=settings.openai_api_key,
            openai_base_url=settings.openai_base_url,
            openai_model=settings.openai_model,
            timeout_seconds=settings.llm_timeout_seconds,
        )
        return cls(
            store=SessionStore(
                timeout_minutes=settings.session_timeout_minutes,
                max_turns=settings.max_conversation_turns,
            ),
            llm_client=LLMClient(
                dispatcher,
                default_temperature=settings.llm_default_temperature,
                default_max_tokens=settings.llm_max_tokens,
            ),
            prd_builder=PRDBuilder(),
            persona_loader=PersonaLoader(settings.personas_dir),
            min_confidence_for_prd=settings.min_confidence_for_prd,
            project_type_confidence_threshold=settings.project_type_confidence_threshold,
            sweep_interval_seconds=settings.sweep_interval_seconds,
        )

    @property
    def store(self) -> SessionStore:
        return self._store

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> None:
        """Load every persona up front so request handling never touches disk."""
        personas = self._personas.load_all()
        logger.info(f"Loaded {len(personas)} personas")

    def start_sweeper(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_loop())
            logger.info(f"Session sweeper started (every {self._sweep_interval}s)")

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("Session sweeper stopped")

    async def shutdown(self) -> None:
        await self.stop_sweeper()
        self.sweep()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()

    def sweep(self) -> int:
        """Drop expired sessions and the locks nobody holds for them."""
        removed = self._store.sweep_expired()
        for session_id in list(self._session_locks):
            lock = self._session_locks[session_id]
            if session_id not in self._store and not lock.locked():
                del self._session_locks[session_id]
        return removed

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._session_locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._session_locks[session_id] = lock
        return lock

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def get_session_info(self, session_id: str) -> Optional[str]:
        """Readable snapshot for diagnostics, or None for unknown ids."""
        return self._store.summarize(session_id)

    async def continue_session(self, session_id: str, user_response: str) -> GeneratePRDOutput:
        return await self.process_input(user_response, session_id=session_id)

    async def process_input(
        self,
        user_input: str,
        session_id: Optional[str] = None,
    ) -> GeneratePRDOutput:
        """
        Handle one user message.

        Raises:
            CompletionRequestFailed: The conversational reply could not be obtained
            DocumentValidationFailed: The assembled PRD failed validation
        """
        lock = self._lock_for(session_id) if session_id else asyncio.Lock()

        async with lock:
            current = self._store.resume(session_id)
            if current is not None and current.status == SessionStatus.COMPLETED:
                # Completed sessions are not resumed.
                logger.info(
                    f"Session {current.id} already completed, starting a new one",
                    extra={"session_id": current.id},
                )
                current = None

            # New sessions reach the store only once a request succeeds.
            work = copy.deepcopy(current) if current is not None else self._store.new_session()

            with LogContext(session_id=work.id):
                result = await self._handle(work, user_input)

            if current is None:
                logger.info(f"Created session {work.id}", extra={"session_id": work.id})
            self._store.save(work)
            return result

    async def _handle(self, session: Session, user_input: str) -> GeneratePRDOutput:
        context = session.context
        first_turn = len(session.turns) == 0

        extracted = context_extractor.extract(user_input)
        context_extractor.merge_into(context, extracted)

        intent: Optional[IntentAnalysis] = None
        if context.project_type is None or first_turn:
            intent = await self._analyze_intent(user_input, extracted)
            if intent.confidence > self._type_threshold and intent.project_type != ProjectType.GENERIC:
                context.project_type = intent.project_type

        self._store.record_turn(
            session,
            TurnRole.USER,
            user_input,
            metadata={
                "intent": intent.project_type.value if intent else None,
                "confidence": intent.confidence if intent else None,
                "features_detected": list(extracted.features),
            },
        )
        session.score = readiness_scorer.score(session)

        analysis = readiness_scorer.analyze_readiness(session, score_gate=self._min_confidence_for_prd)
        logger.info(
            f"Readiness {analysis.completeness}% (score {session.score}), ready={analysis.ready}",
            extra={"completeness": analysis.completeness, "score": session.score},
        )

        if analysis.ready:
            return self._assemble(session, analysis)
        return await self._continue(session, user_input, analysis, intent)

    async def _analyze_intent(
        self,
        user_input: str,
        extracted: context_extractor.ExtractedContext,
    ) -> IntentAnalysis:
        suggestions: List[str] = []
        try:
            classification = await self._llm.classify_intent(user_input)
        except CompletionRequestFailed as e:
            logger.warning(f"Intent classification unavailable, using keywords: {e.message}")
            classification = classify_by_keywords(user_input)
            suggestions.append(DETAIL_SUGGESTION)

        return self._extend_intent(classification, extracted, suggestions)

    @staticmethod
    def _extend_intent(
        classification: IntentClassification,
        extracted: context_extractor.ExtractedContext,
        suggestions: List[str],
    ) -> IntentAnalysis:
        return IntentAnalysis(
            project_type=classification.project_type,
            confidence=classification.confidence,
            detected_features=list(extracted.features),
            complexity_estimate=extracted.complexity,
            suggestions=suggestions,
            reasoning=classification.reasoning,
        )

    async def _continue(
        self,
        session: Session,
        user_input: str,
        analysis: ReadinessAnalysis,
        intent: Optional[IntentAnalysis],
    ) -> GeneratePRDOutput:
        persona = self._personas.select(session.context.project_type)
        session.persona_id = persona.id

        reply = await self._llm.generate_reply(
            user_input,
            persona.to_prompt(),
            session.turns,
            session.context,
            session_id=session.id,
        )

        self._store.record_turn(
            session,
            TurnRole.ASSISTANT,
            reply.response,
            metadata={"persona": persona.id, "confidence": reply.confidence, "type": reply.type},
        )
        session.score = readiness_scorer.score(session)

        questions = (
            reply.questions
            or analysis.clarification_questions
            or generate_questions(session.context)
        )
        output_type = OutputType.CONVERSATION if reply.type == "completion" else OutputType.CLARIFICATION

        return GeneratePRDOutput(
            type=output_type,
            session_id=session.id,
            content=OutputContent(
                message=reply.response,
                questions=questions,
                suggestions=intent.suggestions if intent else [],
                missing_information=analysis.missing_information,
                debug_info=DebugInfo(
                    persona_used=persona.id,
                    confidence=reply.confidence,
                    reasoning=f"completeness {analysis.completeness}%, reply type {reply.type}",
                    completeness=analysis.completeness,
                    score=session.score,
                    transport=reply.transport,
                ),
            ),
        )

    def _assemble(self, session: Session, analysis: ReadinessAnalysis) -> GeneratePRDOutput:
        document = self._builder.build(session)
        validation = self._builder.validate(document)
        if not validation.valid:
            logger.warning(f"PRD validation failed: {validation.errors}")
            raise DocumentValidationFailed(validation.errors, validation.warnings)

        session.status = SessionStatus.COMPLETED
        self._store.record_turn(
            session,
            TurnRole.ASSISTANT,
            f"PRD generated: {document.metadata.name}",
            metadata={"prd_generated": True, "confidence": document.metadata.confidence_score},
        )
        session.score = readiness_scorer.score(session)

        logger.info(
            f"PRD generated: {document.metadata.name} ({document.metadata.confidence_score}%)",
            extra={"confidence": document.metadata.confidence_score},
        )

        return GeneratePRDOutput(
            type=OutputType.PRD,
            session_id=session.id,
            content=OutputContent(
                prd=document,
                warnings=validation.warnings,
                missing_information=analysis.missing_information,
                debug_info=DebugInfo(
                    persona_used=session.persona_id or "persona_generic",
                    confidence=document.metadata.confidence_score,
                    reasoning=f"assembled from {session.turn_count} turns",
                    completeness=analysis.completeness,
                    score=session.score,
                ),
            ),
        )
