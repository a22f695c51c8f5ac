"""
Models for puter_deploy.

Immutable dataclasses for the deploy inputs, local files, remote metadata
and results.
"""
import math
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ValidationError

DEFAULT_CONCURRENCY = 8
DEFAULT_API_ORIGIN = "https://api.puter.com"
HOSTING_DOMAIN = "puter.site"

_TRUE_VALUES = {"true", "True", "TRUE"}
_FALSE_VALUES = {"false", "False", "FALSE"}


class BindingAction(Enum):
    """Outcome of binding reconciliation."""
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class FileEntry:
    """Local file discovered under the source root."""
    absolute_path: Path
    relative_path: str  # POSIX separators, relative to the source root


@dataclass(frozen=True)
class UploadTask:
    """A local file paired with its remote destination."""
    entry: FileEntry
    remote_path: str


@dataclass(frozen=True)
class RemoteEntry:
    """Remote filesystem metadata as returned by ``stat``."""
    uid: Optional[str]
    path: Optional[str]
    is_dir: bool
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @staticmethod
    def looks_like_directory(payload: Any) -> bool:
        """Detect a directory across the metadata shapes the API returns."""
        if not isinstance(payload, dict):
            return False
        if any(payload.get(key) is True for key in ("is_dir", "isDirectory", "isDir")):
            return True
        kind = str(payload.get("type") or payload.get("kind") or payload.get("entry_type") or "")
        return kind.lower() in {"directory", "dir", "folder"}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RemoteEntry":
        payload = payload or {}
        uid = payload.get("uid") or payload.get("id")
        return cls(
            uid=str(uid) if uid is not None else None,
            path=payload.get("path"),
            is_dir=cls.looks_like_directory(payload),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class Binding:
    """Current subdomain -> directory mapping held by the hosting layer."""
    subdomain: str
    root_directory_uid: Optional[str] = None
    root_directory_path: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], fallback_subdomain: str = "") -> "Binding":
        payload = payload or {}
        root_dir = payload.get("root_dir") or {}
        if isinstance(root_dir, dict):
            uid = root_dir.get("uid") or root_dir.get("id")
            path = root_dir.get("path")
        else:
            uid, path = None, root_dir
        return cls(
            subdomain=payload.get("subdomain") or fallback_subdomain,
            root_directory_uid=str(uid) if uid is not None else None,
            root_directory_path=path,
        )


@dataclass(frozen=True)
class BindingResult:
    """Action taken by the reconciler and the binding it left in place."""
    action: BindingAction
    binding: Binding


@dataclass(frozen=True)
class DeployResult:
    """Final outcome of a deployment run."""
    deployed_files: int
    deployment_url: str
    binding_action: BindingAction
    remote_path: str
    subdomain: str

    @property
    def outputs(self) -> Dict[str, str]:
        """Key/value pairs published to the CI runner."""
        return {
            "deployed_files": str(self.deployed_files),
            "deployment_url": self.deployment_url,
            "binding_action": self.binding_action.value,
        }


def deployment_url(subdomain: str) -> str:
    """Public URL for a subdomain; only its leaf label is used."""
    leaf = subdomain.strip().split(".")[0]
    return f"https://{leaf}.{HOSTING_DOMAIN}"


def parse_bool(value: Union[str, bool, None], name: str, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    value = value.strip()
    if not value:
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValidationError(
        f"Input '{name}' must be one of true/True/TRUE/false/False/FALSE. Received: {value!r}"
    )


def parse_concurrency(value: Union[str, int, float, None]) -> int:
    """Parse a concurrency value; anything unusable falls back to the default."""
    if value is None:
        return DEFAULT_CONCURRENCY
    try:
        number = float(str(value).strip())
    except ValueError:
        return DEFAULT_CONCURRENCY
    if not math.isfinite(number) or int(number) <= 0:
        return DEFAULT_CONCURRENCY
    return int(number)


@dataclass(frozen=True)
class DeployConfig:
    """Immutable, validated configuration for one deployment run."""
    subdomain: str
    remote_path: str
    token: str = field(repr=False)
    source_path: Path = Path(".")
    include_hidden: bool = False
    concurrency: int = DEFAULT_CONCURRENCY
    api_origin: str = DEFAULT_API_ORIGIN
    timeout: float = 60.0

    @classmethod
    def from_inputs(
        cls,
        subdomain: Optional[str],
        remote_path: Optional[str],
        token: Optional[str],
        source_path: Optional[str] = None,
        include_hidden: Union[str, bool, None] = None,
        concurrency: Union[str, int, None] = None,
        api_origin: Optional[str] = None,
        workspace: Optional[str] = None,
        timeout: float = 60.0,
    ) -> "DeployConfig":
        """
        Validate raw inputs and build a config.

        Args:
            subdomain: Target subdomain (required)
            remote_path: Remote directory to deploy into (required)
            token: API auth token (required)
            source_path: Local file or directory, relative to ``workspace``
            include_hidden: Upload dot-files too
            concurrency: Max parallel uploads
            api_origin: Remote API base URL
            workspace: Base for a relative source path (default: cwd)

        Raises:
            ValidationError: on any missing or invalid input
        """
        subdomain = (subdomain or "").strip()
        remote_path = (remote_path or "").strip()
        token = (token or "").strip()
        if not subdomain:
            raise ValidationError("Input 'subdomain' cannot be empty.")
        if not remote_path:
            raise ValidationError("Input 'puter_path' cannot be empty.")
        if not token:
            raise ValidationError("Input 'puter_token' cannot be empty.")

        base = Path(workspace) if workspace else Path(os.getcwd())
        source = Path(os.path.abspath(base / Path((source_path or "").strip() or ".").expanduser()))
        if not os.path.lexists(source):
            raise ValidationError(f"source_path does not exist: {source}")

        return cls(
            subdomain=subdomain,
            remote_path=remote_path,
            token=token,
            source_path=source,
            include_hidden=parse_bool(include_hidden, "include_hidden"),
            concurrency=parse_concurrency(concurrency),
            api_origin=(api_origin or "").strip().rstrip("/") or DEFAULT_API_ORIGIN,
            timeout=timeout,
        )
