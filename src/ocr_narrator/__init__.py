"""OCR Narrator - Streaming text stabilization and correction.

Turns the rapid, noisy stream of text recognized from live camera frames
into a slow stream of dictionary-corrected fragments worth reading aloud.
"""

__version__ = "0.1.0"

from ocr_narrator.config import EngineConfig
from ocr_narrator.narration import Emit, NarrationGate, Suppress, SuppressReason
from ocr_narrator.session import FrameResult, SessionEngine
from ocr_narrator.vocabulary import Dictionary, FragmentCorrector, WordCorrector, load_dictionary

__all__ = [
    "Dictionary",
    "Emit",
    "EngineConfig",
    "FragmentCorrector",
    "FrameResult",
    "NarrationGate",
    "SessionEngine",
    "Suppress",
    "SuppressReason",
    "WordCorrector",
    "load_dictionary",
    "__version__",
]
