from .browser_launcher import BrowserLauncher, BrowserSession
from .output_encoder import OutputEncoder

__all__ = [
    "BrowserLauncher",
    "BrowserSession",
    "OutputEncoder",
]
