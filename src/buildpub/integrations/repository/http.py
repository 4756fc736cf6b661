"""
buildpub.integrations.repository.http - HTTP Repository Client
================================================================

Talks to an Artifactory-style repository over HTTP with ``requests``:

    deploy_artifact  → PUT {url}/{repository}/{artifact_path};key=value;...
                       headers X-Checksum-Md5 / X-Checksum-Sha1, file body
    send_build_info  → PUT {url}/api/build, JSON body

Artifact properties travel as matrix parameters on the upload URL. Every
network or HTTP-status failure surfaces as TransportError.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import requests
import structlog

from buildpub.core.config import PublisherConfig
from buildpub.core.exceptions import ConfigurationError, TransportError
from buildpub.core.models import BuildRecord, DeployableArtifact
from buildpub.integrations.repository.base import RepositoryClient


logger = structlog.get_logger()

BUILD_INFO_ENDPOINT = "api/build"


class HttpRepositoryClient(RepositoryClient):
    """Repository client backed by a ``requests.Session``.

    Attributes:
        session: The HTTP session; closed by shutdown().
    """

    def __init__(
        self,
        config: PublisherConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not config.repository_url:
            raise ConfigurationError(
                message="The HTTP repository client requires a repository URL",
                error_code="MISSING_REPOSITORY_URL",
            )
        super().__init__(config)

        self._base_url = config.repository_url.rstrip("/")
        self.session = session or requests.Session()
        if config.username:
            self.session.auth = (config.username, config.password or "")
        self.session.headers.update({"User-Agent": "buildpub"})

        self._logger = logger.bind(component="http_repository_client", url=self._base_url)

    # =========================================================================
    # URL Helpers
    # =========================================================================

    def artifact_url(self, artifact: DeployableArtifact) -> str:
        """Build the upload URL, properties encoded as matrix parameters."""
        path = quote(artifact.artifact_path.lstrip("/"), safe="/")
        url = f"{self._base_url}/{quote(artifact.target_repository, safe='')}/{path}"
        for key, value in artifact.properties.items():
            url += f";{quote(key, safe='')}={quote(value, safe=',')}"
        return url

    # =========================================================================
    # RepositoryClient Implementation
    # =========================================================================

    def deploy_artifact(self, artifact: DeployableArtifact) -> None:
        self._ensure_open()
        url = self.artifact_url(artifact)
        headers: dict[str, str] = {}
        if artifact.md5:
            headers["X-Checksum-Md5"] = artifact.md5
        if artifact.sha1:
            headers["X-Checksum-Sha1"] = artifact.sha1

        self._logger.info(
            "deploying_artifact",
            artifact_path=artifact.artifact_path,
            target_repository=artifact.target_repository,
        )
        try:
            with open(artifact.source_file, "rb") as body:
                response = self.session.put(
                    url,
                    data=body,
                    headers=headers,
                    timeout=self._config.timeout_seconds,
                )
        except (OSError, requests.RequestException) as exc:
            raise TransportError(
                message=f"Failed to deploy '{artifact.source_file}': {exc}",
                error_code="DEPLOY_FAILED",
                details={"url": url, "artifact_path": artifact.artifact_path},
            ) from exc

        self._check_response(
            response,
            error_code="DEPLOY_FAILED",
            details={"url": url, "artifact_path": artifact.artifact_path},
        )

    def send_build_info(self, build: BuildRecord) -> None:
        self._ensure_open()
        url = f"{self._base_url}/{BUILD_INFO_ENDPOINT}"

        self._logger.info("sending_build_info", build_name=build.name, build_number=build.number)
        try:
            response = self.session.put(
                url,
                data=build.model_dump_json(exclude_none=True),
                headers={"Content-Type": "application/json"},
                timeout=self._config.timeout_seconds,
            )
        except (OSError, requests.RequestException) as exc:
            raise TransportError(
                message=f"Failed to publish build info: {exc}",
                error_code="BUILD_INFO_PUBLISH_FAILED",
                details={"url": url},
            ) from exc

        self._check_response(
            response,
            error_code="BUILD_INFO_PUBLISH_FAILED",
            details={"url": url, "build_name": build.name, "build_number": build.number},
        )

    def _close(self) -> None:
        self.session.close()
        self._logger.debug("session_closed")

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _check_response(
        self,
        response: requests.Response,
        error_code: str,
        details: dict[str, Any],
    ) -> None:
        if response.status_code < 400:
            return
        details = {**details, "status_code": response.status_code, "body": response.text[:500]}
        raise TransportError(
            message=f"Repository responded with HTTP {response.status_code} for {details['url']}",
            error_code=error_code,
            details=details,
        )
