from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from container_build.core.constants import RequestType, ResponseStatus
from container_build.core.exceptions import ConfigurationError


class CustomResourceEvent(BaseModel):
    """Lifecycle event delivered by the orchestrator to the custom resource function.

    Field names follow the orchestrator's PascalCase keys via aliases;
    unknown keys (``ServiceToken``, ``OldResourceProperties``...) are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_type: RequestType = Field(..., alias="RequestType")
    response_url: str = Field(..., alias="ResponseURL")
    stack_id: str = Field(..., alias="StackId")
    request_id: str = Field(..., alias="RequestId")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    physical_resource_id: str | None = Field(default=None, alias="PhysicalResourceId")
    resource_type: str | None = Field(default=None, alias="ResourceType")
    resource_properties: dict[str, Any] = Field(default_factory=dict, alias="ResourceProperties")

    @property
    def build_project(self) -> str:
        """The ``BuildProject`` resource property.

        Raises:
            ConfigurationError: If the property is missing or empty.
        """
        project = self.resource_properties.get("BuildProject")
        if not isinstance(project, str) or not project:
            raise ConfigurationError(
                "ResourceProperties.BuildProject is required",
                details={"logical_resource_id": self.logical_resource_id},
            )
        return project

    @property
    def starts_build(self) -> bool:
        return self.request_type in (RequestType.CREATE, RequestType.UPDATE)


class CustomResourceResponse(BaseModel):
    """Acknowledgment document PUT to the event's response URL."""

    model_config = ConfigDict(populate_by_name=True)

    status: ResponseStatus = Field(..., alias="Status")
    reason: str = Field(..., alias="Reason")
    physical_resource_id: str = Field(..., alias="PhysicalResourceId")
    stack_id: str = Field(..., alias="StackId")
    request_id: str = Field(..., alias="RequestId")
    logical_resource_id: str = Field(..., alias="LogicalResourceId")
    no_echo: bool = Field(default=False, alias="NoEcho")
    data: dict[str, Any] = Field(default_factory=dict, alias="Data")

    def to_body(self) -> str:
        return self.model_dump_json(by_alias=True)
