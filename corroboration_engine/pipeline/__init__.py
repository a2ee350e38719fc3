"""End-to-end corroboration pipeline."""

from corroboration_engine.pipeline.corroboration_pipeline import CorroborationPipeline

__all__ = ["CorroborationPipeline"]
