"""Download a template repository snapshot from GitHub."""

from __future__ import annotations

import logging
import os
import shutil
import ssl
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

import httpx
import truststore

from velocity_cli.upgrade.errors import TemplateDownloadError

logger = logging.getLogger(__name__)

CODELOAD_URL = "https://codeload.github.com/{owner}/{name}/zip/{ref}"
# codeload resolves HEAD to the default branch; branches and tags resolve by name.
DEFAULT_REF = "HEAD"


def _github_token(cli_token: str | None = None) -> str | None:
    """Return sanitized GitHub token (cli arg takes precedence) or None."""
    return ((cli_token or os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip()) or None


def _github_auth_headers(cli_token: str | None = None) -> dict[str, str]:
    """Return Authorization header dict only when a non-empty token exists."""
    token = _github_token(cli_token)
    return {"Authorization": f"Bearer {token}"} if token else {}


@dataclass(frozen=True)
class TemplateRef:
    owner: str
    name: str
    ref: str = DEFAULT_REF

    @property
    def archive_url(self) -> str:
        return CODELOAD_URL.format(owner=self.owner, name=self.name, ref=self.ref)


def parse_template_ref(repo: str) -> TemplateRef:
    """Parse ``owner/name``, ``owner/name#ref`` or ``github:owner/name``."""
    slug = repo.strip()
    if slug.startswith("github:"):
        slug = slug[len("github:"):]
    slug, _, ref = slug.partition("#")
    parts = slug.strip("/").split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid template repository '{repo}'. Expected format owner/name[#ref]")
    return TemplateRef(owner=parts[0], name=parts[1], ref=ref or DEFAULT_REF)


def _default_client() -> httpx.Client:
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return httpx.Client(verify=ssl_context)


def extract_archive(zip_path: Path, destination: Path) -> None:
    """Extract ``zip_path`` into ``destination``.

    GitHub archives wrap everything in one ``<repo>-<ref>/`` directory;
    that level is flattened away.
    """
    destination.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(dir=destination.parent) as staging_dir:
        staging = Path(staging_dir)
        with zipfile.ZipFile(zip_path, "r") as zip_ref:
            zip_ref.extractall(staging)

        extracted_items = list(staging.iterdir())
        source_dir = staging
        if len(extracted_items) == 1 and extracted_items[0].is_dir():
            source_dir = extracted_items[0]

        for item in source_dir.iterdir():
            shutil.move(str(item), str(destination / item.name))


def download_template(
    repo: str,
    destination: Path,
    *,
    client: httpx.Client | None = None,
    github_token: str | None = None,
) -> None:
    """Materialize the template ``repo`` into ``destination``.

    Raises:
        TemplateDownloadError: On any transport or archive failure.
    """
    try:
        template = parse_template_ref(repo)
    except ValueError as exc:
        raise TemplateDownloadError(str(exc)) from exc

    owns_client = client is None
    http = client or _default_client()
    logger.debug("Downloading %s", template.archive_url)
    try:
        with tempfile.TemporaryDirectory() as download_dir:
            zip_path = Path(download_dir) / f"{template.name}-{template.ref}.zip"
            with http.stream(
                "GET",
                template.archive_url,
                timeout=60,
                follow_redirects=True,
                headers=_github_auth_headers(github_token),
            ) as response:
                if response.status_code != 200:
                    response.read()
                    raise TemplateDownloadError(
                        f"Download of {template.owner}/{template.name}@{template.ref} failed "
                        f"with HTTP {response.status_code}: {response.text[:400]}"
                    )
                with open(zip_path, "wb") as handle:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        handle.write(chunk)
            extract_archive(zip_path, destination)
    except httpx.HTTPError as exc:
        raise TemplateDownloadError(f"Could not download template: {exc}") from exc
    except (zipfile.BadZipFile, OSError) as exc:
        raise TemplateDownloadError(f"Could not extract template archive: {exc}") from exc
    finally:
        if owns_client:
            http.close()


__all__ = ["TemplateRef", "download_template", "extract_archive", "parse_template_ref"]
