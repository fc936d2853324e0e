"""
Artifact fetch workflow.

A Workflow is an ordered list of fetch processes tried in turn, plus a
publish process that stores anything fetched remotely. Both the local cache
and remote repositories use the Maven directory layout:

    org/testng/testng/6.8.7/testng-6.8.7.jar
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..project import Artifact
from .downloader import ArtifactDownloader, ArtifactNotFoundError


def artifact_path(artifact: Artifact, source: bool = False) -> str:
    """Relative Maven-layout path of an artifact (or its sources jar)."""
    classifier = "-sources" if source else ""
    filename = f"{artifact.name}-{artifact.version}{classifier}.{artifact.type}"
    return "/".join([*artifact.group.split("."), artifact.project, str(artifact.version), filename])


class CacheProcess:
    """Looks artifacts up in (and publishes them to) a local directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory).expanduser()

    def fetch(self, artifact: Artifact, source: bool = False) -> Optional[Path]:
        path = self.directory / artifact_path(artifact, source)
        return path if path.is_file() else None

    def __repr__(self) -> str:
        return f"CacheProcess({self.directory})"


class URLProcess:
    """Downloads artifacts from a Maven-layout repository URL."""

    def __init__(self, url: str, downloader: Optional[ArtifactDownloader] = None):
        self.url = url.rstrip("/")
        self.downloader = downloader or ArtifactDownloader()

    def fetch_to(self, artifact: Artifact, destination: Path, source: bool = False) -> Optional[Path]:
        """
        Download an artifact straight to ``destination``.

        Returns:
            The destination path, or None if the repository does not have it

        Raises:
            DownloadError: On network failures
            ChecksumError: If the published checksum does not match
        """
        url = f"{self.url}/{artifact_path(artifact, source)}"
        try:
            sha1 = self.downloader.fetch_checksum(url)
            return self.downloader.download(url, destination, sha1)
        except ArtifactNotFoundError:
            logging.debug(f"Artifact {artifact} not found at {url}")
            return None

    def __repr__(self) -> str:
        return f"URLProcess({self.url})"


@dataclass
class Workflow:
    """Fetch processes tried in order and the cache results are published to."""

    publish: CacheProcess
    fetch: List[URLProcess] = field(default_factory=list)

    def fetch_artifact(self, artifact: Artifact, source: bool = False) -> Optional[Path]:
        """
        Locate an artifact file, downloading and publishing it if needed.

        Returns:
            Path to the local file, or None if no process could provide it
        """
        cached = self.publish.fetch(artifact, source)
        if cached is not None:
            return cached

        destination = self.publish.directory / artifact_path(artifact, source)
        for process in self.fetch:
            file = process.fetch_to(artifact, destination, source)
            if file is not None:
                logging.info(f"Fetched {artifact} from {process.url}")
                return file

        return None
