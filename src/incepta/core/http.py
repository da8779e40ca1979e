"""
HTTP Downloads
==============

Download and unpack model archives.

The standalone classifier fetches its frozen graph and label file as a ZIP
archive the first time it runs. Downloads go through a requests session
with retry on transient server errors; archives are not checksummed.

Example:
    >>> download_if_missing(
    ...     "DNNModels",
    ...     ["tensorflow_inception_graph.pb", "imagenet_comp_graph_label_strings.txt"],
    ...     "https://storage.googleapis.com/download.tensorflow.org/models/inception5h.zip",
    ... )
"""

import logging
import zipfile
from pathlib import Path
from typing import Callable, Iterable, Optional, Union
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from incepta.core.paths import ensure_directory

logger = logging.getLogger(__name__)

USER_AGENT = "incepta/0.1"


class DownloadClient:
    """
    Streaming file downloader with retry support.

    Args:
        timeout: Request timeout in seconds (default: 30).
        max_retries: Maximum number of retries (default: 3).
        chunk_size: Bytes per streamed chunk.
        user_agent: User-Agent header value.

    Example:
        >>> with DownloadClient(timeout=60) as client:
        ...     client.download("https://example.com/model.zip", "model.zip")
    """

    def __init__(
        self,
        timeout: int = 30,
        max_retries: int = 3,
        chunk_size: int = 8192,
        user_agent: str = USER_AGENT,
    ):
        self.timeout = timeout
        self.chunk_size = chunk_size

        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": user_agent})

    def download(
        self,
        url: str,
        filepath: Union[str, Path],
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> Path:
        """
        Download a file from URL.

        Args:
            url: URL to download from.
            filepath: Local path to save file.
            progress_callback: Callback(downloaded_bytes, total_bytes).

        Returns:
            Path to downloaded file.

        Raises:
            requests.RequestException: On request failure.
        """
        filepath = Path(filepath)

        response = self.session.get(url, stream=True, timeout=self.timeout)
        response.raise_for_status()

        total_size = int(response.headers.get("content-length", 0))
        downloaded = 0

        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "wb") as f:
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)
                if progress_callback:
                    progress_callback(downloaded, total_size)

        logger.info(f"Downloaded {url} ({downloaded} bytes) to {filepath}")
        return filepath

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def filename_from_url(url: str, default: str = "downloaded_file") -> str:
    """
    Get the last path component of a URL, ignoring query parameters.

    Args:
        url: Source URL
        default: Name returned when the URL has no file component

    Returns:
        File name
    """
    name = Path(urlparse(url).path).name
    return name or default


def extract_zip_file(zip_path: Union[str, Path], output_dir: Union[str, Path]) -> str:
    """
    Extract a ZIP archive to a directory.

    Args:
        zip_path: Path to the ZIP file
        output_dir: Directory to extract to

    Returns:
        Path to the output directory

    Raises:
        zipfile.BadZipFile: If the file is not a valid ZIP archive
    """
    ensure_directory(output_dir)
    with zipfile.ZipFile(zip_path, "r") as zip_ref:
        zip_ref.extractall(output_dir)
    return str(output_dir)


def download_if_missing(
    folder: Union[str, Path],
    expected_files: Iterable[str],
    url: str,
    client: Optional[DownloadClient] = None,
) -> bool:
    """
    Download and unpack an archive unless all expected files are present.

    The archive is saved inside ``folder``, extracted there and then deleted.
    Whether the expected files exist afterwards is left to the caller.

    Args:
        folder: Destination folder
        expected_files: File names that must exist in ``folder``
        url: Archive URL
        client: Optional DownloadClient (a default one is created otherwise)

    Returns:
        True if a download happened, False if everything was already present
    """
    folder = Path(folder)
    if all((folder / name).exists() for name in expected_files):
        return False

    ensure_directory(folder)
    archive = folder / filename_from_url(url, default="archive.zip")

    owns_client = client is None
    client = client or DownloadClient()
    try:
        logger.info(f"Downloading {url} to {archive}")
        client.download(url, archive)
    finally:
        if owns_client:
            client.close()

    extract_zip_file(archive, folder)
    archive.unlink()
    return True
