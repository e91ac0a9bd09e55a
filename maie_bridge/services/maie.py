"""
Client for the MAIE transcription and summarization service.

Every call is a single request/response round trip. There are no retries,
so callers that need them have to add their own.
"""

import logging
import mimetypes
from typing import Any, BinaryIO, Dict, Mapping, Optional

import requests
from flask import current_app

from .errors import MaieConfigError, MaieHTTPError
from .maie_models import ProcessResponse, StatusResponse

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = "summary"


class MaieClient:
    """Client for the MAIE HTTP API."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        request_timeout: Optional[float] = None,
        health_timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Base URL of the MAIE service
            api_key: Value sent as ``X-API-Key``; required for everything but the health probe
            request_timeout: Timeout for submit/status/template calls, ``None`` waits indefinitely
            health_timeout: Timeout for the health probe in seconds. requests applies it to
                the connect and to each socket read, so it bounds a stalled server but not
                one that keeps trickling bytes
            session: Optional pre-built requests session
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.request_timeout = request_timeout
        self.health_timeout = health_timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping[str, Any], session: Optional[requests.Session] = None) -> "MaieClient":
        return cls(
            base_url=config.get("MAIE_API_URL") or "http://localhost:8000",
            api_key=config.get("MAIE_API_KEY"),
            request_timeout=config.get("MAIE_REQUEST_TIMEOUT"),
            health_timeout=config.get("MAIE_HEALTH_TIMEOUT") or 5.0,
            session=session,
        )

    @staticmethod
    def _is_success(response: requests.Response) -> bool:
        return 200 <= response.status_code < 300

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise MaieConfigError("MAIE_API_KEY is not configured")
        return {"X-API-Key": self.api_key}

    def _http_error(self, prefix: str, response: requests.Response, include_body: bool = True, **context) -> MaieHTTPError:
        body = response.text
        logger.error(
            "%s: status=%s reason=%s url=%s context=%s body=%s",
            prefix, response.status_code, response.reason, response.url, context, body[:1000],
        )
        if include_body:
            message = f"{prefix}: {response.status_code} {response.reason} - {body}"
        else:
            message = f"{prefix}: {response.status_code}"
        return MaieHTTPError(message, response.status_code, reason=response.reason, body=body)

    def submit(
        self,
        stream: BinaryIO,
        filename: str,
        template_id: Optional[str] = None,
        features: str = DEFAULT_FEATURES,
    ) -> ProcessResponse:
        """
        Submit audio for transcription and summarization.

        Args:
            stream: Readable binary stream with the audio; its size need not be known
            filename: Name reported to MAIE for the upload
            template_id: Optional summary template
            features: Feature-set selector understood by MAIE

        Returns:
            ProcessResponse with the assigned task id
        """
        headers = self._auth_headers()
        logger.info("Submitting audio to MAIE filename=%s template_id=%s features=%s", filename, template_id, features)

        content_type = mimetypes.guess_type(filename)[0] or "audio/wav"
        data = {"features": features}
        if template_id:
            data["template_id"] = template_id

        try:
            response = self.session.post(
                self._url("/v1/process"),
                headers=headers,
                data=data,
                files={"file": (filename, stream, content_type)},
                timeout=self.request_timeout,
            )
            if not self._is_success(response):
                raise self._http_error("MAIE request failed", response, filename=filename)
            result = ProcessResponse.from_dict(response.json())
        except MaieHTTPError:
            raise
        except Exception:
            logger.exception("submit to MAIE raised filename=%s template_id=%s", filename, template_id)
            raise

        logger.info("MAIE accepted processing request task_id=%s status=%s", result.task_id, result.status)
        return result

    def submit_text(self, text: str, template_id: Optional[str] = None) -> ProcessResponse:
        """Submit plain text for summarization (no transcription)."""
        headers = self._auth_headers()
        headers["Content-Type"] = "application/json"
        logger.info("Submitting text to MAIE length=%d template_id=%s", len(text), template_id)

        try:
            response = self.session.post(
                self._url("/v1/process_text"),
                headers=headers,
                json={"text": text, "template_id": template_id, "features": DEFAULT_FEATURES},
                timeout=self.request_timeout,
            )
            if not self._is_success(response):
                raise self._http_error("MAIE text request failed", response)
            result = ProcessResponse.from_dict(response.json())
        except MaieHTTPError:
            raise
        except Exception:
            logger.exception("submit_text to MAIE raised template_id=%s", template_id)
            raise

        logger.info("MAIE accepted text processing request task_id=%s status=%s", result.task_id, result.status)
        return result

    def get_status(self, task_id: str) -> StatusResponse:
        """Fetch the current status of a task. The status value is not interpreted."""
        headers = self._auth_headers()
        try:
            response = self.session.get(
                self._url(f"/v1/status/{task_id}"),
                headers=headers,
                timeout=self.request_timeout,
            )
            if not self._is_success(response):
                raise self._http_error("MAIE status request failed", response, include_body=False, task_id=task_id)
            return StatusResponse.from_dict(response.json())
        except MaieHTTPError:
            raise
        except Exception:
            logger.exception("get_status from MAIE raised task_id=%s", task_id)
            raise

    def check_health(self) -> bool:
        """Return True only when MAIE answers the health probe with a 2xx. Never raises.

        ``health_timeout`` is the requests (connect, read) timeout, not a deadline
        for the whole call.
        """
        try:
            response = self.session.get(self._url("/health"), timeout=self.health_timeout)
            return self._is_success(response)
        except Exception as e:
            logger.warning("MAIE health check failed: %s", e)
            return False

    # Template catalogue

    def _request_json(self, method: str, path: str, prefix: str, auth: bool = False, **kwargs) -> Any:
        headers = self._auth_headers() if auth else {}
        try:
            response = self.session.request(
                method,
                self._url(path),
                headers=headers,
                timeout=self.request_timeout,
                **kwargs
            )
            if not self._is_success(response):
                raise self._http_error(prefix, response)
            if response.status_code == 204 or not response.content:
                return None
            return response.json()
        except MaieHTTPError:
            raise
        except Exception:
            logger.exception("%s: request raised %s %s", prefix, method, path)
            raise

    def list_templates(self) -> Dict[str, Any]:
        return self._request_json("GET", "/v1/templates", "MAIE list templates failed")

    def get_template(self, template_id: str) -> Dict[str, Any]:
        return self._request_json("GET", f"/v1/templates/{template_id}", "MAIE get template failed")

    def get_template_schema(self, template_id: str) -> Dict[str, Any]:
        return self._request_json("GET", f"/v1/templates/{template_id}/schema", "MAIE get template schema failed")

    def create_template(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a template. MAIE expects name, description, schema_data and optionally prompt_template/example."""
        return self._request_json("POST", "/v1/templates", "MAIE create template failed", auth=True, json=data)

    def update_template(self, template_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update a template. Only schema_data, prompt_template and example are accepted by MAIE."""
        allowed = {k: v for k, v in data.items() if k in ("schema_data", "prompt_template", "example")}
        return self._request_json("PUT", f"/v1/templates/{template_id}", "MAIE update template failed", auth=True, json=allowed)

    def delete_template(self, template_id: str) -> None:
        self._request_json("DELETE", f"/v1/templates/{template_id}", "MAIE delete template failed", auth=True)


def init_app(app, session: Optional[requests.Session] = None) -> MaieClient:
    client = MaieClient.from_config(app.config, session=session)
    if not client.api_key:
        app.logger.warning("MAIE_API_KEY not set - processing and template mutations will fail")
    app.extensions["maie"] = client
    return client


def get_maie_client() -> MaieClient:
    return current_app.extensions["maie"]
