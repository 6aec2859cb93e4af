"""
Bundling session - ties the selection, progress and export together.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .exceptions import BundleError
from .models import BundleConfig, BundleResult
from .pipeline import PDFImageBundler
from .progress import ProgressTracker
from .selection import ImageSelection
from .utils.pdf_utils import save_pdf_bytes

logger = logging.getLogger(__name__)


@dataclass
class BundleSession:
    """State for one interactive session: selected images, run status and progress."""

    config: BundleConfig = field(default_factory=BundleConfig)
    selection: ImageSelection = field(default_factory=ImageSelection)
    progress: ProgressTracker = field(default_factory=ProgressTracker)
    is_generating: bool = False
    last_error: Optional[Exception] = None
    last_result: Optional[BundleResult] = None

    async def generate_async(self, output_dir: Union[str, Path] = ".") -> Optional[Path]:
        """
        Bundle the current selection and write it to output_dir.

        Does nothing when the selection is empty or a run is already in
        progress. Failures are logged and kept in last_error; the session
        always returns to idle and nothing is written on failure.

        Returns:
            Path of the written PDF, or None if nothing was produced
        """
        if len(self.selection) == 0:
            logger.warning("No images selected, nothing to generate")
            return None
        if self.is_generating:
            logger.warning("A PDF is already being generated")
            return None

        entries = self.selection.snapshot()
        self.is_generating = True
        self.last_error = None
        self.progress.reset()

        try:
            bundler = PDFImageBundler(config=self.config, progress=self.progress)
            result = await bundler.run(entries)
            filepath = save_pdf_bytes(result.pdf_bytes, output_dir, result.filename)
            self.last_result = result
            return filepath
        except (BundleError, OSError) as e:
            logger.error(f"Error generating PDF: {e}")
            self.last_error = e
            return None
        finally:
            self.is_generating = False

    def generate(self, output_dir: Union[str, Path] = ".") -> Optional[Path]:
        """Blocking wrapper around generate_async()."""
        return asyncio.run(self.generate_async(output_dir))
