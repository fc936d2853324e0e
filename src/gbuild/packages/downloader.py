"""Artifact downloader with progress tracking and checksum verification.

Downloads dependency artifacts from Maven-layout repositories. Repositories
publish a ``.sha1`` file next to every artifact; when present it is used to
verify the download.
"""

import hashlib
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests
from tqdm import tqdm


class DownloadError(Exception):
    """Raised when download fails."""

    pass


class ChecksumError(Exception):
    """Raised when checksum verification fails."""

    pass


class ArtifactNotFoundError(DownloadError):
    """Raised when the repository answers 404 for an artifact."""

    pass


class ArtifactDownloader:
    """Downloads artifacts with progress tracking."""

    def __init__(self, chunk_size: int = 8192, timeout: float = 30, show_progress: bool = True):
        """Initialize downloader.

        Args:
            chunk_size: Size of chunks for downloading and hashing
            timeout: Connect/read timeout in seconds for each request
            show_progress: Whether to show a progress bar while downloading
        """
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.show_progress = show_progress

    def fetch_checksum(self, url: str) -> Optional[str]:
        """Fetch the published SHA-1 checksum for an artifact URL.

        Returns:
            Hex digest, or None if the repository does not publish one
        """
        try:
            response = requests.get(f"{url}.sha1", timeout=self.timeout)
        except requests.RequestException as e:
            raise DownloadError(f"Failed to download checksum for {url}: {e}") from e

        if response.status_code == 404:
            return None
        if not response.ok:
            raise DownloadError(f"Failed to download checksum for {url}: HTTP {response.status_code}")

        # Some repositories append the file name after the digest
        text = response.text.strip()
        return text.split()[0] if text else None

    def download(self, url: str, dest_path: Path, sha1: Optional[str] = None) -> Path:
        """Download a file from a URL.

        Args:
            url: URL to download from
            dest_path: Destination file path
            sha1: Optional SHA-1 checksum for verification

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If download fails
            ChecksumError: If checksum verification fails
        """
        dest_path = Path(dest_path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)

        # Use temporary file during download
        temp_file = dest_path.with_suffix(dest_path.suffix + ".tmp")

        try:
            response = requests.get(url, stream=True, timeout=self.timeout)
            if response.status_code == 404:
                raise ArtifactNotFoundError(f"Not found: {url}")
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", 0))

            progress_bar = None
            if self.show_progress and total_size > 0:
                filename = Path(urlparse(url).path).name
                progress_bar = tqdm(
                    total=total_size,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                    desc=f"Downloading {filename}",
                )

            digest = hashlib.sha1() if sha1 else None

            with open(temp_file, "wb") as f:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if chunk:
                        f.write(chunk)
                        if progress_bar:
                            progress_bar.update(len(chunk))
                        if digest:
                            digest.update(chunk)

            if progress_bar:
                progress_bar.close()

            if sha1 and digest:
                actual_checksum = digest.hexdigest()
                if actual_checksum.lower() != sha1.lower():
                    temp_file.unlink()
                    raise ChecksumError(
                        f"Checksum mismatch for {url}\n"
                        + f"Expected: {sha1}\n"
                        + f"Got: {actual_checksum}"
                    )

            temp_file.replace(dest_path)
            return dest_path

        except requests.RequestException as e:
            if temp_file.exists():
                temp_file.unlink()
            raise DownloadError(f"Failed to download {url}: {e}") from e

        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise
