"""Page analysis engine: fetch, parse, classify links, probe, detect login forms."""

from page_analyzer.engine.models import AnalysisResult, AnalysisStatus, LinkRecord
from page_analyzer.engine.orchestrator import AnalysisService, Analyzer, ResultStore

__all__ = [
    "Analyzer",
    "AnalysisService",
    "AnalysisResult",
    "AnalysisStatus",
    "LinkRecord",
    "ResultStore",
]
