from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from studio.errors import UploadError
from studio.store import AssetStore, policy_for

logger = logging.getLogger(__name__)


@dataclass
class LocalAssetStore(AssetStore):
    """
    Filesystem-backed AssetStore.

    Files land in `<root_dir>/<bucket>/<object path>` and are served from
    `<base_url>/<bucket>/<object path>` by whatever mounts `root_dir`.
    """

    root_dir: str = "./assets"
    base_url: str = "/assets"

    async def upload(self, bucket: str, filename: str, data: bytes, content_type: Optional[str]) -> str:
        policy = policy_for(bucket)
        policy.check(filename, len(data), content_type)

        object_path = policy.object_path(filename)
        target = self._resolve(bucket, object_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            target.write_bytes(data)
        except OSError as e:
            raise UploadError(f"Could not store {filename!r} in {bucket}") from e

        logger.info("uploaded bucket=%s path=%s bytes=%s", bucket, object_path, len(data))
        return f"{self.base_url.rstrip('/')}/{bucket}/{object_path}"

    async def remove(self, bucket: str, path: str) -> None:
        """`path` may be an object path or a full public URL from `upload`."""
        policy_for(bucket)
        marker = f"/{bucket}/"
        if marker in path:
            path = path.split(marker, 1)[1]
        target = self._resolve(bucket, path)
        target.unlink(missing_ok=True)
        logger.info("removed bucket=%s path=%s", bucket, path)

    def _resolve(self, bucket: str, object_path: str) -> Path:
        base = (Path(self.root_dir) / bucket).resolve()
        target = (base / object_path).resolve()
        if base not in target.parents:
            raise UploadError(f"Path escapes bucket {bucket}: {object_path}")
        return target
