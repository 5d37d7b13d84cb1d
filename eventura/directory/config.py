from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _snapshot_path_from_env() -> Path | None:
    raw = os.getenv("EVENTURA_VENDOR_DIRECTORY", "").strip()
    return Path(raw) if raw else None


@dataclass(frozen=True)
class DirectoryConfig:
    snapshot_path: Path | None = field(default_factory=_snapshot_path_from_env)
    # Host storage keys, tried in order
    storage_keys: tuple[str, ...] = (
        "eventura-vendors",
        "eventura_os_vendors_v1",
        "eventura_vendors_v1",
        "eventura-vendor-list",
    )


DEFAULT_DIRECTORY_CONFIG = DirectoryConfig()
