from .analysis_client import AnalysisClient, GeminiAnalysisClient
from .analysis_session import AnalysisSession
from .file_encoder import FileEncoder
from .prompts import AnalysisPrompts

__all__ = [
    "AnalysisClient",
    "GeminiAnalysisClient",
    "AnalysisSession",
    "FileEncoder",
    "AnalysisPrompts",
]
