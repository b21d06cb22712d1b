"""Buildspec generation from an explicit registry configuration."""

from container_build.buildspec.renderer import build_request, buildspec_yaml, render_buildspec

__all__ = ["build_request", "buildspec_yaml", "render_buildspec"]
