"""
puter_deploy - deploy a local folder to Puter hosting.

Uploads a file tree into a remote directory and makes sure a subdomain
serves that directory. Both steps are idempotent: re-running a deploy
overwrites files in place and leaves a correct binding untouched.

Usage:
    from puter_deploy import DeployConfig, DeployOrchestrator

    config = DeployConfig.from_inputs(
        subdomain="my-site",
        remote_path="/me/sites/my-site",
        token=token,
        source_path="dist",
    )
    async with DeployOrchestrator(config) as deployer:
        result = await deployer.deploy()
    print(result.deployment_url, result.binding_action.value)
"""
from .errors import (
    DeployError,
    DirectoryCreationError,
    InvalidSourceError,
    PathConflictError,
    RemoteAPIError,
    ValidationError,
)
from .models import (
    Binding,
    BindingAction,
    BindingResult,
    DeployConfig,
    DeployResult,
    FileEntry,
    RemoteEntry,
    UploadTask,
)
from .orchestrator import DeployOrchestrator, deploy

__version__ = "0.1.0"
__all__ = [
    # Main
    "DeployOrchestrator",
    "deploy",
    # Models
    "DeployConfig",
    "DeployResult",
    "FileEntry",
    "RemoteEntry",
    "Binding",
    "BindingAction",
    "BindingResult",
    "UploadTask",
    # Errors
    "DeployError",
    "ValidationError",
    "InvalidSourceError",
    "PathConflictError",
    "DirectoryCreationError",
    "RemoteAPIError",
]
