"""Custom resource adapter: run a build on stack create/update and acknowledge it."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from container_build.core.config import TriggerConfig
from container_build.core.constants import ResponseStatus
from container_build.core.exceptions import ConfigurationError, ContainerBuildError
from container_build.core.types import BuildRequest
from container_build.custom_resource.models import CustomResourceEvent
from container_build.custom_resource.response import ResponseSender
from container_build.service.codebuild import CodeBuildService
from container_build.trigger.runner import BuildTrigger
from container_build.utils.async_helpers import run_sync
from container_build.utils.logging import bind_lambda_context, configure_logging

logger = structlog.get_logger(__name__)

_DEFAULT_LOG_STREAM = "container-build"


class CustomResourceHandler:
    """Handles one lifecycle event and sends exactly one acknowledgment.

    * ``Create`` / ``Update``: start the ``BuildProject`` build and wait for
      it; ``SUCCESS`` only if it finishes ``SUCCEEDED``.
    * ``Delete``: acknowledged ``SUCCESS`` without starting anything.

    Usage::

        handler = CustomResourceHandler(BuildTrigger(CodeBuildService()))
        status = await handler.handle(event, context)
    """

    def __init__(self, trigger: BuildTrigger, sender: ResponseSender | None = None) -> None:
        self._trigger = trigger
        self._sender = sender or ResponseSender()

    async def handle(
        self, event: dict[str, Any] | CustomResourceEvent, context: Any = None
    ) -> ResponseStatus:
        """Process *event* and return the status that was acknowledged.

        Raises:
            ConfigurationError: If *event* is not a valid lifecycle event.
                Nothing can be acknowledged in that case.
            ResponseDeliveryError: If the acknowledgment could not be sent.
        """
        parsed = self.parse_event(event)
        log_stream = _log_stream(context)
        log = logger.bind(
            request_type=str(parsed.request_type),
            request_id=parsed.request_id,
            logical_resource_id=parsed.logical_resource_id,
        )
        log.info("custom_resource_event_received")

        if not parsed.starts_build:
            await self._sender.send(parsed, ResponseStatus.SUCCESS, log_stream_name=log_stream)
            return ResponseStatus.SUCCESS

        try:
            request = BuildRequest(project_name=parsed.build_project)
            outcome = await self._trigger.execute(request)
        except ContainerBuildError as exc:
            log.error("custom_resource_build_error", error=str(exc), code=exc.code)
            await self._sender.send(
                parsed, ResponseStatus.FAILED, log_stream_name=log_stream, reason=str(exc)
            )
            return ResponseStatus.FAILED
        except Exception as exc:
            # Acknowledge before propagating so the stack does not hang
            log.exception("custom_resource_unexpected_error")
            await self._sender.send(
                parsed, ResponseStatus.FAILED, log_stream_name=log_stream, reason=str(exc)
            )
            raise

        data = {"BuildId": outcome.build_id, "BuildStatus": str(outcome.final_status)}
        if outcome.succeeded:
            await self._sender.send(
                parsed, ResponseStatus.SUCCESS, log_stream_name=log_stream, data=data
            )
            return ResponseStatus.SUCCESS

        await self._sender.send(
            parsed,
            ResponseStatus.FAILED,
            log_stream_name=log_stream,
            reason=f"Build {outcome.build_id} finished with status {outcome.final_status}",
            data=data,
        )
        return ResponseStatus.FAILED

    @staticmethod
    def parse_event(event: dict[str, Any] | CustomResourceEvent) -> CustomResourceEvent:
        if isinstance(event, CustomResourceEvent):
            return event
        try:
            return CustomResourceEvent.model_validate(event)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid custom resource event: {exc.error_count()} error(s)",
                details={"errors": exc.errors(include_url=False)},
            ) from exc


def _log_stream(context: Any) -> str:
    return getattr(context, "log_stream_name", None) or _DEFAULT_LOG_STREAM


async def acknowledge_init_failure(
    event: CustomResourceEvent,
    context: Any,
    error: Exception,
    sender: ResponseSender | None = None,
) -> None:
    """Send ``FAILED`` for *event* when the handler itself could not be set up."""
    await (sender or ResponseSender()).send(
        event,
        ResponseStatus.FAILED,
        log_stream_name=_log_stream(context),
        reason=f"Initialization failed: {error}",
    )


def lambda_handler(event: dict[str, Any], context: Any) -> str:
    """Synchronous Lambda entry point.

    Configuration comes from the environment (see
    :meth:`TriggerConfig.from_env`); the build runs against CodeBuild in the
    function's region. If the configuration is invalid the event is
    acknowledged ``FAILED`` and the error is re-raised.
    """
    parsed = CustomResourceHandler.parse_event(event)
    bind_lambda_context(context)
    try:
        config = TriggerConfig.from_env()
        configure_logging(config.log_level, json=config.log_json)
        trigger = BuildTrigger(CodeBuildService(region=config.region), config)
    except Exception as exc:
        logger.exception("custom_resource_init_failed", request_id=parsed.request_id)
        run_sync(acknowledge_init_failure(parsed, context, exc))
        raise

    status = run_sync(CustomResourceHandler(trigger).handle(parsed, context))
    return str(status)
