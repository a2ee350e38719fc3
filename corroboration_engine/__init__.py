"""Evidence corroboration and confidence engine.

Turns a claim and an oracle's candidate sources into a deduplicated,
trust-ranked, temporally resolved verdict with an auditable confidence.
"""

__version__ = "0.1.0"

from corroboration_engine.pipeline.corroboration_pipeline import CorroborationPipeline

__all__ = ["CorroborationPipeline", "__version__"]
