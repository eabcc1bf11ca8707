"""Pipeline stages."""

from aocfetch.pipeline.get import GetPipeline

__all__ = [
    "GetPipeline",
]
