"""Zip extractor for unpacking downloaded snapshot archives"""

import logging
import shutil
import zipfile
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)


class ZipExtractor:
    """Extracts zip archives into a cache directory, skipping existing output"""

    def __init__(self, cache_dir: Path):
        """Initialize zip extractor

        Args:
            cache_dir: Directory that receives the extracted files
        """
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def is_extracted(self, target_dir: Path) -> bool:
        """Check whether a target directory already holds extracted files"""
        return target_dir.is_dir() and any(target_dir.iterdir())

    def extract_archive(
        self,
        zip_path: Path,
        target_name: Optional[str] = None,
        force_refresh: bool = False,
    ) -> Path:
        """Extract a zip archive into the cache directory

        Args:
            zip_path: Path to the zip file
            target_name: Name of the directory the archive unpacks into
                (default: the archive stem)
            force_refresh: If True, extract again even if output exists

        Returns:
            Path to the extracted directory
        """
        target_dir = self.cache_dir / (target_name or zip_path.stem)

        # Return existing extraction unless we're forcing refresh
        if self.is_extracted(target_dir) and not force_refresh:
            logger.info(f"Using existing extracted data: {target_dir}")
            return target_dir

        if not zip_path.exists():
            raise FileNotFoundError(f"Archive not found: {zip_path}")

        logger.info(f"Extracting {zip_path.name} to {self.cache_dir}")

        # Only a complete extraction is moved into place
        partial_dir = self.cache_dir / f".{target_dir.name}.partial"
        if partial_dir.exists():
            shutil.rmtree(partial_dir)

        try:
            with zipfile.ZipFile(zip_path, "r") as zip_ref:
                members = zip_ref.namelist()
                if not members:
                    raise ValueError(f"No files found in {zip_path}")

                for member in tqdm(members, desc=f"Extracting {zip_path.name}", unit="file"):
                    zip_ref.extract(member, partial_dir)
        except Exception:
            shutil.rmtree(partial_dir, ignore_errors=True)
            raise

        # Archives either carry their own top-level directory or not
        nested = all(m.startswith(f"{target_dir.name}/") for m in members)
        extracted = partial_dir / target_dir.name if nested else partial_dir

        if target_dir.exists():
            shutil.rmtree(target_dir)
        extracted.replace(target_dir)
        shutil.rmtree(partial_dir, ignore_errors=True)

        logger.debug(f"Extracted {len(members)} files to {target_dir}")
        return target_dir

    def list_extracted_files(self, target_dir: Path, pattern: str = "*") -> List[Path]:
        """List extracted files matching a glob pattern"""
        return sorted(p for p in target_dir.rglob(pattern) if p.is_file())
