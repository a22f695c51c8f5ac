"""Subdomain binding reconciliation."""
import logging

from ..errors import is_not_found
from ..models import Binding, BindingAction, BindingResult
from ..protocols import IHostingAPI

logger = logging.getLogger(__name__)


class BindingReconciler:
    """
    Points a subdomain at a directory, touching the binding only when needed.

    Absent         -> create  (``created``)
    BoundElsewhere -> update  (``updated``)
    BoundCorrectly -> nothing (``unchanged``)

    "Same directory" means same uid; paths are not compared.
    """

    def __init__(self, hosting: IHostingAPI):
        self._hosting = hosting

    async def reconcile(self, subdomain: str, remote_path: str, target_uid: str) -> BindingResult:
        try:
            current = await self._hosting.get(subdomain)
        except Exception as exc:
            if not is_not_found(exc):
                raise
            logger.info(f"Subdomain {subdomain} not bound yet, creating binding")
            created = await self._hosting.create(subdomain, remote_path)
            return BindingResult(BindingAction.CREATED, self._binding(created, subdomain, remote_path, target_uid))

        binding = Binding.from_payload(current, subdomain)
        if binding.root_directory_uid == target_uid:
            logger.debug(f"Subdomain {subdomain} already bound to {target_uid}")
            return BindingResult(BindingAction.UNCHANGED, binding)

        logger.info(
            f"Subdomain {subdomain} bound to {binding.root_directory_uid}, rebinding to {target_uid}"
        )
        updated = await self._hosting.update(subdomain, remote_path)
        return BindingResult(BindingAction.UPDATED, self._binding(updated, subdomain, remote_path, target_uid))

    @staticmethod
    def _binding(payload, subdomain: str, remote_path: str, target_uid: str) -> Binding:
        if isinstance(payload, dict) and payload:
            binding = Binding.from_payload(payload, subdomain)
            if binding.root_directory_uid:
                return binding
            return Binding(binding.subdomain, target_uid, binding.root_directory_path or remote_path)
        return Binding(subdomain, target_uid, remote_path)
