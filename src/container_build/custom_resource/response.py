"""Delivery of custom resource acknowledgments to the pre-signed response URL."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from container_build.core.constants import ResponseStatus
from container_build.core.exceptions import ResponseDeliveryError
from container_build.custom_resource.models import CustomResourceEvent, CustomResourceResponse

logger = structlog.get_logger(__name__)


class ResponseSender:
    """PUTs a single ``SUCCESS``/``FAILED`` document for a lifecycle event.

    The response URL is a pre-signed S3 URL; the signature does not cover a
    content type, so the request is sent with an empty ``Content-Type``.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self._timeout = timeout

    async def send(
        self,
        event: CustomResourceEvent,
        status: ResponseStatus,
        *,
        log_stream_name: str,
        reason: str | None = None,
        physical_resource_id: str | None = None,
        data: dict[str, Any] | None = None,
        no_echo: bool = False,
    ) -> CustomResourceResponse:
        """Send the acknowledgment and return the document that was sent.

        Raises:
            ResponseDeliveryError: On transport failure or a non-2xx response.
        """
        response = CustomResourceResponse(
            status=status,
            reason=reason or f"See the details in CloudWatch Log Stream: {log_stream_name}",
            physical_resource_id=physical_resource_id
            or event.physical_resource_id
            or log_stream_name,
            stack_id=event.stack_id,
            request_id=event.request_id,
            logical_resource_id=event.logical_resource_id,
            no_echo=no_echo,
            data=data or {},
        )
        body = response.to_body().encode("utf-8")

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.put(
                    event.response_url,
                    content=body,
                    headers={"content-type": ""},
                )
        except httpx.RequestError as exc:
            logger.error("custom_resource_response_failed", error=str(exc))
            raise ResponseDeliveryError(
                f"Failed to deliver {status} response: {exc}",
                details={"request_id": event.request_id},
            ) from exc

        if resp.status_code >= 300:  # noqa: PLR2004
            logger.error("custom_resource_response_rejected", status_code=resp.status_code)
            raise ResponseDeliveryError(
                f"Response URL rejected {status} response with HTTP {resp.status_code}",
                details={"request_id": event.request_id},
                status_code=resp.status_code,
            )

        logger.info(
            "custom_resource_response_sent",
            status=str(status),
            request_id=event.request_id,
            logical_resource_id=event.logical_resource_id,
        )
        return response
