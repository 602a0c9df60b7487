import logging
import uuid
from typing import Any, Optional

from app.core.clock import Clock, system_clock


class BaseService:
    """
    Common plumbing for domain services: the injected clock, the tenant
    (organization) the records belong to, id minting and structured logging.
    """

    def __init__(self, clock: Optional[Clock] = None, organization_id: Optional[int] = None):
        self.clock = clock or system_clock
        self.org_id = organization_id
        self._logger = logging.getLogger(self.__class__.__module__)

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    def _extra(self, fields: dict) -> dict:
        if self.org_id is not None:
            fields = {"organization_id": self.org_id, **fields}
        return fields

    def log_info(self, message: str, **fields: Any) -> None:
        self._logger.info(message, extra=self._extra(fields))

    def log_warning(self, message: str, **fields: Any) -> None:
        self._logger.warning(message, extra=self._extra(fields))

    def log_error(self, message: str, **fields: Any) -> None:
        self._logger.error(message, extra=self._extra(fields))
