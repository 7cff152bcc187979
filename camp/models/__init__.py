from .event import Event
from .beneficiary import Beneficiary

__all__ = ["Event", "Beneficiary"]
