"""External model assessment: prompts, bounded calls, and response parsing.

Provides the Assessor (timeout + transient retry around an adapter),
scoring prompt/tool builders, and the Response Interpreter that turns
untrusted model output into clamped scores.
"""

from __future__ import annotations

from imgscore.assessment.assessor import Assessor
from imgscore.assessment.interpreter import ScoreExtraction, interpret_score

__all__ = [
    "Assessor",
    "ScoreExtraction",
    "interpret_score",
]
