"""Pipeline building blocks."""

from neuroconn.pipeline.base import BaseModule, ModuleResult

__all__ = ["BaseModule", "ModuleResult"]
