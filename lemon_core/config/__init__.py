from .config_service import ConfigService, marshal
from .environ import load_environ, load_profile

__all__ = ["ConfigService", "load_environ", "load_profile", "marshal"]
