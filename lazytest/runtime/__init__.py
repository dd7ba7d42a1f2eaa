"""Session context, configuration and the run pipeline."""

from .pipeline import run_install_then_test, run_pipeline
from .session import Session

__all__ = ["Session", "run_install_then_test", "run_pipeline"]
