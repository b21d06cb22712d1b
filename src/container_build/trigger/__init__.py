"""Start-and-wait orchestration for build projects."""

from container_build.trigger.runner import BuildTrigger

__all__ = ["BuildTrigger"]
