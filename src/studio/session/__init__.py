from studio.session.delta import compute_deltas
from studio.session.edit_session import EditSession

__all__ = ["EditSession", "compute_deltas"]
