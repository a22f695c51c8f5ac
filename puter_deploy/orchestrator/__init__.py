"""Orchestrator package - coordinates deployment runs."""
from .binding import BindingReconciler
from .core import DeployOrchestrator, deploy
from .directory import ensure_remote_directory
from .file_collector import FileCollector
from .parallel import UploadScheduler, run_bounded

__all__ = [
    "DeployOrchestrator",
    "deploy",
    "BindingReconciler",
    "ensure_remote_directory",
    "FileCollector",
    "UploadScheduler",
    "run_bounded",
]
