from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


def _origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    db_path: str = "./data/tasks.db"
    log_level: str = "INFO"
    log_dir: str = "./logs"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "127.0.0.1"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=os.getenv("DB_PATH", "./data/tasks.db"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("LOG_DIR", "./logs"),
            cors_origins=_origins(os.getenv("CORS_ORIGINS", "*")),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "3000")),
        )
