#!/usr/bin/env python3
"""
Safe Write Operations with Atomic Writes and Checksums

Ranking outputs are written to a temporary file in the destination directory,
checksummed, and then atomically renamed into place so readers never see a
half-written file.
"""

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, Union, Optional
import logging

from scoreboard.utils.json_safety import to_json_safe
from scoreboard.utils.logger import get_logger


def compute_file_checksum(file_path: Path, algorithm: str = 'md5') -> str:
    """
    Compute checksum for a file.

    Args:
        file_path: Path to the file
        algorithm: Hash algorithm ('md5', 'sha1', 'sha256')

    Returns:
        Hexadecimal checksum string
    """
    hash_obj = hashlib.new(algorithm)

    with open(file_path, 'rb') as f:
        for chunk in iter(lambda: f.read(4096), b""):
            hash_obj.update(chunk)

    return hash_obj.hexdigest()


def safe_write_json(data: Any, path: Union[str, Path],
                    logger: Optional[logging.Logger] = None) -> Dict[str, Union[str, int, Path]]:
    """
    Safely write JSON data with atomic operation and checksum.

    DataFrames and numpy/pandas scalars inside data are converted first.

    Args:
        data: Dictionary, list or DataFrame to write as JSON
        path: Destination file path
        logger: Optional logger instance

    Returns:
        Dictionary with path, checksum, and size information

    Raises:
        Exception: If write operation fails
    """
    if logger is None:
        logger = get_logger()

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename atomic
    temp_path = path.with_suffix(path.suffix + '.tmp')

    try:
        logger.debug(f"Writing JSON to temporary file: {temp_path}")

        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(to_json_safe(data), f, indent=2, ensure_ascii=False, allow_nan=False)

        checksum = compute_file_checksum(temp_path)
        size_bytes = temp_path.stat().st_size

        temp_path.replace(path)

        logger.info(f"Successfully wrote JSON: {path} ({size_bytes:,} bytes, MD5: {checksum})")

        return {
            "path": path,
            "checksum": checksum,
            "size_bytes": size_bytes,
            "format": "json"
        }

    except Exception as e:
        if temp_path.exists():
            temp_path.unlink()
        logger.error(f"Failed to write JSON to {path}: {e}")
        raise


def verify_file_integrity(file_path: Path, expected_checksum: str,
                          algorithm: str = 'md5') -> bool:
    """
    Verify file integrity by comparing checksums.

    Args:
        file_path: Path to the file to verify
        expected_checksum: Expected checksum value
        algorithm: Hash algorithm used

    Returns:
        True if checksums match, False otherwise
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return False

    actual_checksum = compute_file_checksum(file_path, algorithm)
    return actual_checksum == expected_checksum
