"""
Session state for one user of the idea lab.

The session owns the current idea and evaluation plus the in-flight flags,
and is the only thing that mutates them. State changes happen when a round
trip starts and when it finishes (success or failure), never in between.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from idealab.config import Settings
from idealab.credentials import CredentialStore
from idealab.errors import (
    ConfigurationRequired,
    IdeaLabError,
    NoIdea,
    RequestInFlight,
    describe_failure,
    failure_details,
)
from idealab.gateway import ModelGateway, check_connection
from idealab.pipeline import RoundTrip, run_round_trip
from idealab.prompts import EVALUATION_FIELDS, IDEA_FIELDS, build_evaluation_prompt, build_idea_prompt
from idealab.scoring import summarize
from models import Evaluation, Idea, SessionSnapshot

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[str], ModelGateway]


def _new_idea_id() -> str:
    return uuid.uuid4().hex


@dataclass
class SessionState:
    idea: Optional[Idea] = None
    evaluation: Optional[Evaluation] = None
    generating: bool = False
    evaluating: bool = False
    error: Optional[str] = None
    diagnostic: Optional[str] = None


class IdeaLabSession:
    def __init__(
        self,
        credentials: CredentialStore,
        gateway_factory: GatewayFactory,
        settings: Optional[Settings] = None,
        id_factory: Callable[[], str] = _new_idea_id,
    ):
        self.settings = settings or Settings()
        self.credentials = credentials
        self.gateway_factory = gateway_factory
        self.id_factory = id_factory
        self.state = SessionState()
        self.idea_trip = RoundTrip("idea", self.settings.idea_config, IDEA_FIELDS, Idea)
        self.evaluation_trip = RoundTrip(
            "evaluation", self.settings.evaluation_config, EVALUATION_FIELDS, Evaluation
        )

    # -- helpers ---------------------------------------------------------
    def _api_key(self) -> str:
        api_key = self.credentials.load()
        if not api_key:
            raise ConfigurationRequired()
        return api_key

    def _record_failure(self, action: str, exc: Exception) -> None:
        if isinstance(exc, IdeaLabError):
            logger.warning("Round trip failed (%s): %s", exc.kind, exc)
        else:
            logger.exception("Unexpected failure while trying to %s", action)
        self.state.error = describe_failure(action, exc)
        self.state.diagnostic = failure_details(exc)

    def clear_messages(self) -> None:
        self.state.error = None
        self.state.diagnostic = None

    # -- round trips -----------------------------------------------------
    async def request_idea(self, category: Optional[str] = None) -> SessionSnapshot:
        """
        Generate a new idea. On success the previous idea and its evaluation
        are replaced; on failure both are kept and ``error`` is set.
        """
        if self.state.generating:
            raise RequestInFlight("generation")
        api_key = self._api_key()

        state = self.state
        state.generating = True
        state.error = None
        state.diagnostic = "Starting API connection..."

        try:
            gateway = self.gateway_factory(api_key)
            if self.settings.precheck_connection:
                check = await check_connection(gateway)
                if not check.success:
                    raise check.error
            idea = await run_round_trip(
                gateway,
                self.idea_trip,
                build_idea_prompt(category),
                extra={"id": self.id_factory()},
            )
        except Exception as exc:
            self._record_failure("generate idea", exc)
        else:
            state.idea = idea
            state.evaluation = None
            state.diagnostic = "Idea generated successfully!"
        finally:
            state.generating = False

        return self.snapshot()

    async def request_evaluation(self) -> SessionSnapshot:
        """
        Evaluate the current idea. A result whose idea was replaced while
        the request was in flight is discarded.
        """
        if self.state.evaluating:
            raise RequestInFlight("evaluation")
        if self.state.generating:
            raise RequestInFlight("generation")
        idea = self.state.idea
        if idea is None:
            raise NoIdea()
        api_key = self._api_key()

        state = self.state
        state.evaluating = True
        state.error = None
        state.diagnostic = "Starting AI evaluation..."

        try:
            gateway = self.gateway_factory(api_key)
            evaluation = await run_round_trip(
                gateway,
                self.evaluation_trip,
                build_evaluation_prompt(idea),
                extra={"ideaId": idea.id},
            )
        except Exception as exc:
            self._record_failure("evaluate idea", exc)
        else:
            if state.idea is idea:
                state.evaluation = evaluation
                state.diagnostic = "AI evaluation completed successfully!"
            else:
                logger.info("Discarding evaluation of replaced idea %s", idea.id)
                state.diagnostic = "Evaluation discarded: the idea changed meanwhile."
        finally:
            state.evaluating = False

        return self.snapshot()

    def snapshot(self) -> SessionSnapshot:
        state = self.state
        return SessionSnapshot(
            configured=self.credentials.configured,
            idea=state.idea,
            evaluation=state.evaluation,
            score=summarize(state.evaluation) if state.evaluation else None,
            generating=state.generating,
            evaluating=state.evaluating,
            error=state.error,
            diagnostic=state.diagnostic,
        )
