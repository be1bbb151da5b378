from commerce.db import get_db

__all__ = ["get_db"]
