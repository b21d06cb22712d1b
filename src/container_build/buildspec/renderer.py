"""Render the CodeBuild buildspec that builds, tags and pushes one container image."""

from __future__ import annotations

from typing import Any

import yaml

from container_build.core.config import RegistryConfig
from container_build.core.types import BuildRequest

BUILDSPEC_VERSION = "0.2"
COMMON_DIR = "_common"


def render_buildspec(config: RegistryConfig) -> dict[str, Any]:
    """Build the buildspec document for *config*.

    Registry and account values come from *config*; nothing is looked up
    from the build environment at runtime apart from the region used for
    the registry login.
    """
    name = config.container_name
    image = config.image_uri
    return {
        "version": BUILDSPEC_VERSION,
        "phases": {
            "pre_build": {
                "commands": [
                    f"git checkout {config.branch}",
                    f"cd {config.project_path}",
                    f"cp -R ../{COMMON_DIR} .",
                ]
            },
            "build": {
                "commands": [
                    "echo Building container",
                    f"chmod +x {COMMON_DIR}/build.sh",
                    f"{COMMON_DIR}/build.sh {name}",
                ]
            },
            "post_build": {
                "commands": [
                    "echo Tagging container image for ECR",
                    f"docker tag {name} {image}",
                    "echo Docker Login to ECR",
                    (
                        f"aws ecr get-login-password --region {config.region} "
                        f"| docker login --username AWS --password-stdin {config.registry}"
                    ),
                    "echo Pushing container images to ECR",
                    f"docker push {image}",
                ]
            },
        },
    }


def buildspec_yaml(config: RegistryConfig) -> str:
    """Return :func:`render_buildspec` serialised as YAML."""
    return yaml.safe_dump(render_buildspec(config), default_flow_style=False, sort_keys=False)


def build_request(project_name: str, config: RegistryConfig) -> BuildRequest:
    """A :class:`BuildRequest` carrying *config* as buildspec and environment overrides."""
    return BuildRequest(
        project_name=project_name,
        environment=config.to_environment(),
        buildspec=buildspec_yaml(config),
    )
