"""Core orchestrator - sequences one deployment run."""
import logging
from typing import Callable, Optional

from ..models import DeployConfig, DeployResult, deployment_url
from ..protocols import IHostingAPI, IRemoteFileSystem
from ..services.api_client import PuterClient
from ..services.filesystem import PuterFileSystem
from ..services.hosting import PuterHosting
from ..utils.events import EventEmitter, UploadProgress
from .binding import BindingReconciler
from .directory import ensure_remote_directory
from .file_collector import FileCollector
from .parallel import UploadScheduler

logger = logging.getLogger(__name__)


class DeployOrchestrator:
    """
    Deploys a local tree to a remote directory and binds a subdomain to it.

    Flow: ensure directory -> collect files -> upload -> reconcile binding.

    The ``PuterClient`` is created per run from the config's token; tests and
    embedders may inject ``fs``/``hosting`` instead.

    Usage:
        async with DeployOrchestrator(config) as deployer:
            deployer.on("progress", lambda p: print(p.completed, p.total))
            result = await deployer.deploy()

    Events:
        phase_start(name), discovered(count), progress(UploadProgress),
        finish(DeployResult)
    """

    def __init__(
        self,
        config: DeployConfig,
        fs: Optional[IRemoteFileSystem] = None,
        hosting: Optional[IHostingAPI] = None,
        client: Optional[PuterClient] = None,
    ):
        self._config = config
        self._fs = fs
        self._hosting = hosting
        self._client = client
        self._owns_client = False
        self._events = EventEmitter()

    async def __aenter__(self):
        if self._fs is None or self._hosting is None:
            if self._client is None:
                self._client = PuterClient(
                    self._config.token,
                    api_origin=self._config.api_origin,
                    timeout=self._config.timeout,
                )
                await self._client.__aenter__()
                self._owns_client = True
            self._fs = self._fs or PuterFileSystem(self._client)
            self._hosting = self._hosting or PuterHosting(self._client)
        return self

    async def __aexit__(self, *args):
        if self._owns_client and self._client:
            await self._client.__aexit__(*args)
            self._client = None
            self._owns_client = False

    def on(self, event_name: str, callback: Callable) -> None:
        self._events.on(event_name, callback)

    async def _report_progress(self, progress: UploadProgress) -> None:
        await self._events.emit("progress", progress)

    async def deploy(self) -> DeployResult:
        assert self._fs is not None and self._hosting is not None
        config = self._config

        logger.info(f"Source path: {config.source_path}")
        logger.info(f"Puter path: {config.remote_path}")
        logger.info(f"Subdomain: {config.subdomain}")

        await self._events.emit("phase_start", "directory")
        root_dir = await ensure_remote_directory(self._fs, config.remote_path)

        await self._events.emit("phase_start", "collect")
        files = FileCollector.collect_files(config.source_path, config.include_hidden)
        logger.info(f"Discovered {len(files)} file(s) to upload")
        await self._events.emit("discovered", len(files))

        await self._events.emit("phase_start", "upload")
        scheduler = UploadScheduler(self._fs, config.concurrency, self._report_progress)
        uploaded = await scheduler.upload(files, config.remote_path)

        await self._events.emit("phase_start", "binding")
        binding = await BindingReconciler(self._hosting).reconcile(
            config.subdomain, config.remote_path, root_dir.uid
        )

        result = DeployResult(
            deployed_files=uploaded,
            deployment_url=deployment_url(binding.binding.subdomain or config.subdomain),
            binding_action=binding.action,
            remote_path=config.remote_path,
            subdomain=config.subdomain,
        )
        logger.info(f"Binding action: {result.binding_action.value}")
        logger.info(f"Deployment URL: {result.deployment_url}")
        await self._events.emit("finish", result)
        return result


async def deploy(config: DeployConfig) -> DeployResult:
    """Run one deployment with a fresh client."""
    async with DeployOrchestrator(config) as deployer:
        return await deployer.deploy()
