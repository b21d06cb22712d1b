"""Custom resource lifecycle adapter for the build trigger."""

from container_build.custom_resource.handler import (
    CustomResourceHandler,
    acknowledge_init_failure,
    lambda_handler,
)
from container_build.custom_resource.models import CustomResourceEvent, CustomResourceResponse
from container_build.custom_resource.response import ResponseSender

__all__ = [
    "CustomResourceEvent",
    "CustomResourceHandler",
    "CustomResourceResponse",
    "ResponseSender",
    "acknowledge_init_failure",
    "lambda_handler",
]
