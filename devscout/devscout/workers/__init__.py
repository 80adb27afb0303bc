from .base import BaseFlow
from .discovery import DiscoveryFlow
from .linkedin import LinkedInEnrichFlow
from .reenrich import ReEnrichFlow
from .sixtyfour import CollectFlow, SubmitFlow

__all__ = ["BaseFlow", "DiscoveryFlow", "SubmitFlow", "CollectFlow", "ReEnrichFlow", "LinkedInEnrichFlow"]
