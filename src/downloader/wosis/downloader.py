"""WoSIS snapshot downloader

Fetches the snapshot archive from ISRIC and unpacks it into the local cache.
Both steps are skipped when their output already exists, so reruns make no
network calls.
"""

import logging
import zipfile
from pathlib import Path
from typing import Optional

import requests
from tqdm import tqdm

from src.constants import (
    DATA_DIR,
    DOWNLOAD_CHUNK_SIZE,
    DOWNLOAD_TIMEOUT,
    WOSIS_SUBDIR,
)
from src.downloader.wosis.models import WosisSnapshot
from src.processing.base.zip_extractor import ZipExtractor

logger = logging.getLogger(__name__)


class WosisDownloader:
    """Downloads and extracts a WoSIS snapshot archive"""

    def __init__(
        self,
        data_dir: Optional[str] = None,
        snapshot: Optional[WosisSnapshot] = None,
    ):
        """Initialize downloader

        Args:
            data_dir: Base data directory (defaults to ./data)
            snapshot: Snapshot release to fetch (defaults to the current default release)
        """
        self.data_dir = Path(data_dir or DATA_DIR)
        self.snapshot = snapshot or WosisSnapshot()
        self.raw_dir = self.data_dir / WOSIS_SUBDIR / "raw"
        self.raw_dir.mkdir(parents=True, exist_ok=True)
        self.extractor = ZipExtractor(self.raw_dir)

    @property
    def archive_path(self) -> Path:
        return self.raw_dir / self.snapshot.archive_name

    @property
    def snapshot_dir(self) -> Path:
        return self.raw_dir / self.snapshot.directory_name

    def check_file_exists(self, file_path: Path) -> bool:
        """Check if file exists"""
        if file_path.exists():
            logger.debug(f"File exists: {file_path}")
            return True
        return False

    def download_archive(self, force: bool = False) -> Path:
        """Download the snapshot archive unless it is already cached

        Args:
            force: Download again even if the archive exists

        Returns:
            Path to the local archive
        """
        if self.check_file_exists(self.archive_path) and not force:
            logger.info(f"Archive already exists, skipping download: {self.archive_path}")
            return self.archive_path

        url = self.snapshot.url
        logger.info(f"Downloading WoSIS snapshot from {url}")
        logger.info(f"Caching to: {self.archive_path}")

        partial_path = self.archive_path.with_suffix(".zip.part")
        try:
            self._download_with_progress(url, partial_path)
        except Exception:
            # Leave no half-written archive behind, the next run starts over
            partial_path.unlink(missing_ok=True)
            raise

        partial_path.replace(self.archive_path)
        logger.info(f"Download complete: {self.archive_path}")
        return self.archive_path

    def _download_with_progress(self, url: str, output_path: Path):
        """Download file with progress bar"""
        with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as response:
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", 0))

            with open(output_path, "wb") as file, tqdm(
                total=total_size,
                unit="B",
                unit_scale=True,
                desc=f"Downloading {self.snapshot.archive_name}",
            ) as pbar:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    file.write(chunk)
                    pbar.update(len(chunk))

    def extract(self, force: bool = False) -> Path:
        """Extract the cached archive into the snapshot directory

        A cached archive that is not a valid zip is deleted before the error
        propagates, so the next run downloads it again.
        """
        try:
            snapshot_dir = self.extractor.extract_archive(
                self.archive_path, self.snapshot.directory_name, force_refresh=force
            )
        except zipfile.BadZipFile:
            logger.error(
                f"Corrupt archive {self.archive_path}, removing it so the next run downloads it again"
            )
            self.archive_path.unlink(missing_ok=True)
            raise

        files = self.extractor.list_extracted_files(snapshot_dir)
        logger.info(f"Extracted {len(files)} files into {snapshot_dir}")
        for path in files:
            logger.debug(f"  * {path.name}")
        return snapshot_dir

    def acquire(self, force: bool = False) -> Path:
        """Make the extracted snapshot available locally

        Presence of the extracted directory is enough to skip all work, even
        if the archive itself has since been removed.

        Args:
            force: Download and extract again

        Returns:
            Path to the extracted snapshot directory
        """
        if self.extractor.is_extracted(self.snapshot_dir) and not force:
            logger.info(f"Snapshot already extracted: {self.snapshot_dir}")
            return self.snapshot_dir

        self.download_archive(force=force)
        return self.extract(force=force)
