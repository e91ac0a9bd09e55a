"""
Notifications pushed to browser clients over Socket.IO.

Each variant knows its event name and builds its own payload, so producers
and the frontend agree on the shape.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional


@dataclass
class Notification:
    event: ClassVar[str] = ""

    def payload(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass
class AuthKick(Notification):
    event: ClassVar[str] = "auth:kick"
    message: str = ""

    def payload(self) -> Dict[str, Any]:
        return {"message": self.message}


@dataclass
class TaskProgress(Notification):
    event: ClassVar[str] = "task:progress"
    task_id: str = ""
    status: str = ""
    progress: int = 0

    def payload(self) -> Dict[str, Any]:
        return {"taskId": self.task_id, "status": self.status, "progress": self.progress}


@dataclass
class TaskComplete(Notification):
    """Terminal state of a task: COMPLETE carries ``result``, FAILED carries the error."""
    event: ClassVar[str] = "task:complete"
    task_id: str = ""
    status: str = ""
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        out = {"taskId": self.task_id, "status": self.status}
        if self.result is not None:
            out["result"] = self.result
        if self.status == "FAILED":
            out["error"] = self.error
            out["errorCode"] = self.error_code
        return out

