"""HTTP access to the ICP sheet-storage API and the remote scorer."""

from .client import ApiError, ICPApiClient

__all__ = ["ApiError", "ICPApiClient"]
