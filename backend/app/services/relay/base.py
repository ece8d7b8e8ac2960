"""
Base class for provider task relays
"""

import abc
import logging
from typing import Any, Dict, FrozenSet, Mapping

from app.core.http_client import UpstreamClient, encode_path_segment
from .coercion import FieldKind, apply_field_table

logger = logging.getLogger(__name__)


class BaseTaskRelay(abc.ABC):
    """Submit a job to one provider and look up its status.

    Subclasses supply the payload translation, the status path and the set
    of status values after which the provider will not change the job again.
    """

    name: str = "provider"
    submit_path: str = ""
    terminal_statuses: FrozenSet[str] = frozenset()
    field_table: Mapping[str, FieldKind] = {}
    defaults: Mapping[str, Any] = {}

    def __init__(self, client: UpstreamClient):
        self.client = client

    @abc.abstractmethod
    def build_payload(self, request: Any) -> Dict[str, Any]:
        """Translate an inbound request into the job-creation payload"""
        pass

    @abc.abstractmethod
    def status_path(self, task_id: str) -> str:
        """Path of the status resource for an encoded task id"""
        pass

    async def submit(self, request: Any) -> Any:
        payload = self.build_payload(request)
        response = await self.client.post_json(self.submit_path, payload)
        task_id = response.get("id") if isinstance(response, dict) else None
        logger.info(f"{self.name} task submitted: {task_id}")
        return response

    async def get_status(self, task_id: str) -> Any:
        return await self.client.get_json(self.status_path(encode_path_segment(task_id)))

    def coerce_parameters(self, parameters: Mapping[str, Any]) -> Dict[str, Any]:
        """Run supplied parameters through this provider's field table and defaults"""
        return apply_field_table(parameters, self.field_table, self.defaults)

    def is_terminal(self, envelope: Any) -> bool:
        if not isinstance(envelope, dict):
            return False
        return envelope.get("status") in self.terminal_statuses
