"""Runtime configuration for a studio session."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class StudioConfig:
    """Tunable parameters shared by the CLI and the TUI."""

    data_dir: Path = field(default_factory=lambda: Path(".lumina"))
    debounce_seconds: float = 2.0
    min_saving_display: float = 0.8  # how long "Saving..." stays visible
    revision_capacity: int = 15
    page_chars: int = 1400
    pages_per_spread: int = 2
    model: str = "gemini-3-flash-preview"
    refine_model: str = "gemini-3-pro-preview"
    timeout_seconds: int = 300
