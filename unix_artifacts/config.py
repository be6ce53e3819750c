import os

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    # Evidence (mounted image or extracted tree standing in for "/")
    EVIDENCE_ROOT: str = os.getenv("EVIDENCE_ROOT", "/")
    OUTPUT_DIR: str = os.path.abspath("./artifact_dump/unix")

    # Parsing behaviour. Defaults are best-effort for partially corrupted evidence.
    STRICT_PARSING: bool = False
    SKIP_MALFORMED_RECORDS: bool = False

    # System-wide assembly
    ISOLATE_USER_FAILURES: bool = False
    MAX_WORKERS: int = 1

    # Mandatory sources on network mounts (NFS/SMB evidence shares)
    READ_RETRY_ATTEMPTS: int = 3

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"


settings = Settings()
