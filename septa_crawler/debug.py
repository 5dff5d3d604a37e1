import logging
import os
from datetime import datetime
from typing import Optional

from .config import SCREENSHOT_DIR

logger = logging.getLogger(__name__)


class DebugRecorder:
    """
    Diagnostic snapshots keyed by checkpoint name.

    Does nothing unless enabled. Never raises: a broken sink must not break
    a crawl.
    """

    def __init__(self, page=None, enabled: bool = False, directory: str = SCREENSHOT_DIR):
        self.page = page
        self.enabled = enabled
        self.directory = directory

    def _path(self, checkpoint: str, extension: str) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
        return os.path.join(self.directory, f"{timestamp}-{checkpoint}.{extension}")

    def capture(self, checkpoint: str, mask=None) -> Optional[str]:
        if not self.enabled or self.page is None:
            return None

        try:
            os.makedirs(self.directory, exist_ok=True)
            path = self._path(checkpoint, "png")
            self.page.screenshot(path=path, full_page=True, mask=mask or [])
            logger.info(f"Debug screenshot saved: {path}")
            return path
        except Exception as e:
            logger.warning(f"Failed to take debug screenshot '{checkpoint}': {e}")
            return None

    def dump_html(self, checkpoint: str, html: str) -> Optional[str]:
        if not self.enabled:
            return None

        try:
            os.makedirs(self.directory, exist_ok=True)
            path = self._path(checkpoint, "html")
            with open(path, "w", encoding="utf-8") as f:
                f.write(html)
            logger.info(f"Saved {path}")
            return path
        except Exception as e:
            logger.warning(f"Failed to save debug HTML '{checkpoint}': {e}")
            return None
