"""Evaluation pipeline: aggregation, recording, and orchestration.

Submodules are imported directly (``imgscore.pipeline.orchestrator``,
``imgscore.pipeline.recorder``) since the models package depends on
``imgscore.pipeline.aggregation``.
"""
