"""
Disk storage for uploaded profile images.

Files land in ``config.upload_dir`` as ``<epoch-millis>-<original name>``
and are served back under ``/uploads/<name>``.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile

from config.settings import config

logger = logging.getLogger(__name__)


def upload_root() -> Path:
    root = Path(config.upload_dir)
    root.mkdir(parents=True, exist_ok=True)
    return root


async def save_upload(file: Optional[UploadFile]) -> Optional[str]:
    """Store ``file`` and return its stored filename, or ``None`` when nothing was sent."""
    if file is None or not file.filename:
        return None

    # Only the basename is kept so a crafted name cannot escape the upload dir.
    original = Path(file.filename).name
    stored_name = f"{int(time.time() * 1000)}-{original}"
    data = await file.read()
    (upload_root() / stored_name).write_bytes(data)
    logger.info("Stored upload %s (%d bytes)", stored_name, len(data))
    return stored_name
