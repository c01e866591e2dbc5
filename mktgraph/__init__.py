# Market Intelligence Graph Analytics
"""
Package structure:
- data: Ingestion boundary, validation, configuration (sole file reader)
- ratings: Rating normalization and issuer debt rollups
- graph: Unified relationship graph and weighted-degree centrality
- league: Bookrunner league tables
- alerts: Threshold alerts, pulse feed, periodic rescans
- pipeline: End-to-end run over one snapshot
- api: Read-only HTTP surface
"""

from .pipeline import PipelineConfig, PipelineResult, load_pipeline_config, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "PipelineConfig",
    "PipelineResult",
    "load_pipeline_config",
    "run_pipeline",
]
