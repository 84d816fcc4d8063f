import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    RESOLVE_DIR: str = os.getenv("RESOLVE_DIR", ".")
    HOSTS_SUFFIX: str = os.getenv("HOSTS_SUFFIX", ".hosts")
    RESOLVE_RECURSIVE: bool = _env_flag("RESOLVE_RECURSIVE")

    # Worker pool. The request queue holds NUM_RESOLVERS * RESOLVE_QUEUE_FACTOR
    # requests; the admission gate holds NUM_RESOLVERS + 1 tokens.
    NUM_RESOLVERS: int = int(os.getenv("NUM_RESOLVERS", "4"))
    RESOLVE_QUEUE_FACTOR: int = int(os.getenv("RESOLVE_QUEUE_FACTOR", "2"))

    # "dns" queries A/AAAA through dnspython, "system" goes through getaddrinfo.
    RESOLVER_BACKEND: str = os.getenv("RESOLVER_BACKEND", "dns")
    DNS_TIMEOUT: float = float(os.getenv("DNS_TIMEOUT", "2.0"))
    DNS_LIFETIME: float = float(os.getenv("DNS_LIFETIME", "3.0"))

    DRAIN_LOG_SECONDS: float = float(os.getenv("DRAIN_LOG_SECONDS", "5.0"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
