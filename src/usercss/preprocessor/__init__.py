from usercss.preprocessor.detector import detect_dialect, preprocessor_name, score_dialects
from usercss.preprocessor.engine import (
    NO_CAPABILITIES,
    ExecutionCapabilities,
    PreprocessorEngine,
    StaticCapabilities,
    compile_with_engine,
    variable_definitions,
)

__all__ = [
    "detect_dialect",
    "preprocessor_name",
    "score_dialects",
    "ExecutionCapabilities",
    "PreprocessorEngine",
    "StaticCapabilities",
    "NO_CAPABILITIES",
    "compile_with_engine",
    "variable_definitions",
]
