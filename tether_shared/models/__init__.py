from tether_shared.models.envelope import Envelope
from tether_shared.models.user import CurrentUser

__all__ = ["CurrentUser", "Envelope"]
