"""
GitHub code scanning integration.

Uploads SARIF reports to the repository's Security tab through the
code scanning REST API.
"""

import base64
import gzip
import logging
from pathlib import Path
from typing import Optional

import requests

from constants import API_REQUEST_TIMEOUT, GITHUB_API_URL
from core.exceptions import IntegrationException

logger = logging.getLogger(__name__)


def encode_sarif(sarif_bytes: bytes) -> str:
    """Gzip and base64 encode a SARIF document, as the upload API requires."""
    return base64.b64encode(gzip.compress(sarif_bytes)).decode("ascii")


class CodeScanningClient:
    """
    Client for the GitHub code scanning SARIF upload endpoint.
    """

    def __init__(self, repository: str, token: str, api_url: str = GITHUB_API_URL):
        """
        Initialize the client.

        Args:
            repository: Repository in `owner/name` form
            token: Token with `security-events: write`
            api_url: GitHub API base URL
        """
        if not repository or "/" not in repository:
            raise IntegrationException("code scanning", f"invalid repository '{repository}'")
        if not token:
            raise IntegrationException("code scanning", "a GitHub token is required to upload results")
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    def upload_sarif(
        self,
        sarif_path: Path,
        commit_sha: str,
        ref: str,
        tool_name: Optional[str] = None,
    ) -> str:
        """
        Upload a SARIF file.

        Args:
            sarif_path: Path of the SARIF report
            commit_sha: Commit the analysis belongs to
            ref: Git ref (e.g. "refs/heads/main")
            tool_name: Optional tool name override shown in the Security tab

        Returns:
            Upload id returned by GitHub

        Raises:
            IntegrationException: If the file is unreadable or the API call fails
        """
        try:
            sarif_bytes = Path(sarif_path).read_bytes()
        except OSError as e:
            raise IntegrationException("code scanning", f"cannot read {sarif_path}: {e}") from e

        payload = {
            "commit_sha": commit_sha,
            "ref": ref,
            "sarif": encode_sarif(sarif_bytes),
        }
        if tool_name:
            payload["tool_name"] = tool_name

        url = f"{self.api_url}/repos/{self.repository}/code-scanning/sarifs"
        logger.info(f"Uploading {sarif_path} to code scanning for {self.repository}@{commit_sha[:12]}")

        try:
            response = self.session.post(url, json=payload, timeout=API_REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            body = e.response.text[:500] if e.response is not None else ""
            raise IntegrationException("code scanning", f"HTTP {status}: {body}") from e
        except requests.Timeout as e:
            raise IntegrationException("code scanning", "upload timed out") from e
        except requests.RequestException as e:
            raise IntegrationException("code scanning", str(e)) from e

        upload_id = str(response.json().get("id", ""))
        logger.info(f"✓ SARIF uploaded (id: {upload_id or 'unknown'})")
        return upload_id
