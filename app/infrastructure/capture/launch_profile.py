"""Launch profiles — which Chromium to start and with which flags, per deployment mode.

A LaunchProfile is chosen once per request by looking up the strategy for
``app_env``. Production asks a minimal-binary provider for its executable
and recommended flags; development uses a locally installed browser.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from app.config import Settings

logger = logging.getLogger(__name__)

_DEFAULT_LOCAL_CHROME = "/usr/bin/chromium-browser"

# Local hosts may themselves be sandboxed (containers, CI), so the OS sandbox is off.
DEVELOPMENT_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
)

# Used when the minimal-binary provider does not report its own flags.
SAFE_DEFAULT_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
    "--no-zygote",
)

# Reduced-footprint flags for serverless Chromium builds.
SERVERLESS_RECOMMENDED_ARGS: tuple[str, ...] = (
    "--allow-running-insecure-content",
    "--autoplay-policy=user-gesture-required",
    "--disable-background-networking",
    "--disable-background-timer-throttling",
    "--disable-breakpad",
    "--disable-component-update",
    "--disable-default-apps",
    "--disable-dev-shm-usage",
    "--disable-domain-reliability",
    "--disable-extensions",
    "--disable-gpu",
    "--disable-hang-monitor",
    "--disable-print-preview",
    "--disable-setuid-sandbox",
    "--disable-speech-api",
    "--disable-sync",
    "--disk-cache-size=33554432",
    "--font-render-hinting=none",
    "--hide-scrollbars",
    "--metrics-recording-only",
    "--mute-audio",
    "--no-default-browser-check",
    "--no-first-run",
    "--no-pings",
    "--no-sandbox",
    "--no-zygote",
    "--single-process",
)


@dataclass(frozen=True)
class LaunchProfile:
    """Everything needed to start Chromium for one environment.

    ``executable_path`` of ``None`` means Playwright's bundled Chromium.
    """

    name: str
    executable_path: str | None
    args: tuple[str, ...]
    headless: bool = True
    ignore_https_errors: bool = True


class ChromiumBinaryProvider(ABC):
    """Source of a minimal Chromium build and its recommended configuration.

    Any of the three answers may be ``None`` when the provider cannot tell.
    """

    @abstractmethod
    def executable_path(self) -> str | None: ...

    @abstractmethod
    def args(self) -> list[str] | None: ...

    @abstractmethod
    def headless(self) -> bool | None: ...


class ServerlessChromiumProvider(ChromiumBinaryProvider):
    """Minimal Chromium located through ``CHROMIUM_EXECUTABLE_PATH``."""

    def __init__(self, executable_path: str = ""):
        self._executable_path = executable_path.strip()

    def executable_path(self) -> str | None:
        if not self._executable_path:
            return None
        if not Path(self._executable_path).exists():
            logger.warning(
                "Minimal Chromium not found at %s — falling back to bundled Chromium",
                self._executable_path,
            )
            return None
        return self._executable_path

    def args(self) -> list[str] | None:
        return list(SERVERLESS_RECOMMENDED_ARGS)

    def headless(self) -> bool | None:
        return True


def _production_profile(settings: Settings, provider: ChromiumBinaryProvider | None) -> LaunchProfile:
    provider = provider or ServerlessChromiumProvider(settings.chromium_executable_path)

    args = provider.args()
    if not args:
        logger.warning("Chromium provider reported no launch flags — using safe defaults")
        args = list(SAFE_DEFAULT_ARGS)

    headless = provider.headless()
    if headless is None:
        logger.warning("Chromium provider reported no headless mode — defaulting to headless")
    elif not headless:
        logger.warning("Chromium provider requested a headed browser — forcing headless")

    return LaunchProfile(
        name="production",
        executable_path=provider.executable_path(),
        args=tuple(args),
        headless=True,
    )


def _development_profile(settings: Settings, provider: ChromiumBinaryProvider | None) -> LaunchProfile:
    executable_path: str | None = settings.chrome_path.strip() or None
    if executable_path is None and Path(_DEFAULT_LOCAL_CHROME).exists():
        executable_path = _DEFAULT_LOCAL_CHROME

    return LaunchProfile(
        name="development",
        executable_path=executable_path,
        args=DEVELOPMENT_ARGS,
        headless=True,
    )


_PROFILE_STRATEGIES: dict[str, Callable[[Settings, ChromiumBinaryProvider | None], LaunchProfile]] = {
    "production": _production_profile,
    "development": _development_profile,
}


def select_launch_profile(
    settings: Settings, provider: ChromiumBinaryProvider | None = None
) -> LaunchProfile:
    """Pick the launch profile for the configured deployment mode."""
    mode = settings.app_env.strip().lower()
    strategy = _PROFILE_STRATEGIES.get(mode)
    if strategy is None:
        logger.warning("Unknown app_env %r — using the development launch profile", settings.app_env)
        strategy = _development_profile

    profile = strategy(settings, provider)
    logger.debug(
        "Selected launch profile %s (executable=%s, %d args)",
        profile.name,
        profile.executable_path or "<bundled>",
        len(profile.args),
    )
    return profile
