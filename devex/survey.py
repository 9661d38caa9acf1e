"""The ``DevExSurvey`` runs developer experience surveys in Slack.

It owns the survey configuration and the Slack token, builds the messages
for each survey phase and hands them to a transport. Survey progress lives
in the Slack message itself, so the survey keeps no per-user state.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Iterable, List, Optional, Set

from config import Config
from config.constants import OperationResult
from devex.errors import MissingRequiredParametersError
from devex.interpreter import get_choice_values, is_closable
from devex.logging_utils import get_logger
from devex.message_builders import (
    produce_close_survey_message,
    produce_open_survey_message,
    produce_opt_in_response,
    produce_opt_out_response,
)
from devex.payload_models import PayloadInput, SurveyResponse, as_callback_payload
from devex.survey_config import SurveyConfiguration, SurveyConfigurationInput, create_configuration
from devex.webhook import DeliveryResult, SlackTransport, Transport


def create_new_devex_survey(
    auth_token: str,
    config: Optional[SurveyConfigurationInput] = None,
    transport: Optional[Transport] = None,
) -> "DevExSurvey":
    """Get a new instance of the ``DevExSurvey``."""
    return DevExSurvey(auth_token, config=config, transport=transport)


class DevExSurvey:
    """Opens, closes and interprets developer experience surveys.

    Args:
        auth_token: Slack bot token used to post survey messages.
        config: Optional partial configuration layered onto the defaults.
        transport: Delivery backend; defaults to an aiohttp ``SlackTransport``.

    Raises:
        InvalidConfigurationError: the merged configuration is incomplete.
        MissingRequiredOptionsParametersError: an option lacks text or value.
        MissingRequiredParametersError: ``auth_token`` is missing.
    """

    def __init__(
        self,
        auth_token: str,
        config: Optional[SurveyConfigurationInput] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        configuration = create_configuration(config)
        if not auth_token:
            raise MissingRequiredParametersError()

        self._auth_token = auth_token
        self._config = configuration
        self.transport: Transport = transport or SlackTransport()
        self.post_message_url = Config.SLACK_POST_MESSAGE_URL
        # Background deliveries started by open(); held so they are not collected early
        self._pending: Set[asyncio.Task] = set()
        get_logger("survey").info("created", extra={"questions": len(configuration.questions)})

    @property
    def config(self) -> SurveyConfiguration:
        return self._config

    async def open(self, users: Iterable[str], wait: bool = False) -> str:
        """Post a survey to every user ID.

        By default deliveries run in the background and ``"opened"`` is
        returned straight away. With ``wait=True`` all deliveries are awaited
        and ``"failed"`` is returned if any of them failed.

        Background deliveries belong to the running event loop. Callers that
        own the loop (e.g. ``asyncio.run``) must await
        ``wait_for_deliveries()`` and then ``transport.close()`` before the
        loop exits, or pending deliveries are cancelled and the HTTP session
        is left open.
        """
        recipients = list(users)
        log = get_logger("survey.open", recipients=len(recipients))
        coros = [self._deliver_open(user) for user in recipients]

        if wait:
            results: List[DeliveryResult] = await asyncio.gather(*coros)
            failed = [r for r in results if not r.ok]
            if failed:
                log.warning("some deliveries failed", extra={"failed": len(failed)})
                return OperationResult.FAILED.value
            log.info("opened")
            return OperationResult.OPENED.value

        for coro in coros:
            task = asyncio.create_task(coro)
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        log.info("opened", extra={"awaited": False})
        return OperationResult.OPENED.value

    async def close(self, payload: PayloadInput) -> str:
        """Close the survey if the payload shows it is complete.

        Posts the completed message to the payload's ``response_url`` and
        returns ``"closed"``; otherwise returns ``"failed"``.
        """
        model = as_callback_payload(payload)
        log = get_logger("survey.close", payload)

        if is_closable(model, len(self._config.questions)):
            message = produce_close_survey_message(self._config)
            await self.transport.post(model.response_url, message.to_dict())
            log.info("closed")
            return OperationResult.CLOSED.value

        log.debug("not closable")
        return OperationResult.FAILED.value

    def create_survey_response(self, payload: PayloadInput) -> SurveyResponse:
        """Produce the normalized response for recording elsewhere."""
        model = as_callback_payload(payload)
        return SurveyResponse(
            team=model.team_domain,
            choices=tuple(get_choice_values(model.state_values)),
            timestamp=int(time.time() * 1000),
        )

    def create_opt_in_response(self) -> Dict[str, Any]:
        """Ephemeral acknowledgement for users opting in."""
        return produce_opt_in_response(self._config).to_dict()

    def create_opt_out_response(self) -> Dict[str, Any]:
        """Ephemeral acknowledgement for users opting out."""
        return produce_opt_out_response(self._config).to_dict()

    async def wait_for_deliveries(self) -> None:
        """Wait for background deliveries started by ``open``."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def _deliver_open(self, user: str) -> DeliveryResult:
        message = produce_open_survey_message(self._config, user)
        return await self.transport.post(self.post_message_url, message.to_dict(), self._auth_token)
