"""
Document Pipeline - turns an ordered set of images into one annotated PDF.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from time import time
from typing import List, Optional, Protocol, Sequence
from pymupdf import Document, open as pdfopen

from .assembler import build_page
from .compositor import apply_watermark
from .exceptions import BundleCancelledError, BundleError, BundleRunError
from .models import BundleConfig, BundleResult, PageLayout, SelectedImageEntry
from .normalizer import normalize_image
from .progress import ProgressSink
from .utils.pdf_utils import get_pdf_page_count, serialize_document

logger = logging.getLogger(__name__)

# Share of the progress bar covered by per-image work; the rest is serialization
IMAGE_PROGRESS_SHARE = 90.0


class CancelToken(Protocol):
    def is_set(self) -> bool:
        ...


@dataclass
class PDFImageBundler:
    """Normalizes, watermarks and lays out images, one page per image, in selection order."""

    config: BundleConfig = field(default_factory=BundleConfig)
    progress: Optional[ProgressSink] = None

    def report_progress(self, percent: float) -> None:
        if self.progress is not None:
            self.progress.report(percent)

    async def process_entry(self, doc: Document, entry: SelectedImageEntry) -> PageLayout:
        """Run one entry through normalize -> watermark -> assemble."""
        normalized = await asyncio.to_thread(
            normalize_image, entry.raw_bytes, self.config.normalization
        )
        watermarked = await asyncio.to_thread(
            apply_watermark, normalized.encoded, self.config.watermark
        )
        return build_page(doc, watermarked, entry.label, self.config.page)

    async def run(
        self,
        entries: Sequence[SelectedImageEntry],
        cancel_event: Optional[CancelToken] = None,
    ) -> BundleResult:
        """
        Build the PDF for a snapshot of the given entries.

        Progress is reported as (i / n) * 90 before each entry and 100 once the
        document is serialized. The first failure aborts the run and no
        document is produced.

        Args:
            entries: Images in the order they should appear
            cancel_event: Optional flag checked between entries

        Returns:
            BundleResult with the serialized PDF and page layouts

        Raises:
            ValueError: If entries is empty
            BundleCancelledError: If cancel_event is set between entries
            BundleRunError: If any entry or the serialization fails
        """
        snapshot = tuple(entries)
        if not snapshot:
            raise ValueError("No images selected")

        total = len(snapshot)
        start_time = time()
        doc = pdfopen()
        pages: List[PageLayout] = []

        try:
            logger.info(f"Bundling {total} images into {self.config.output_filename}")

            for position, entry in enumerate(snapshot):
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning(f"Run cancelled before image {position + 1}/{total}")
                    raise BundleCancelledError(
                        f"Cancelled after {position} of {total} images"
                    )

                self.report_progress((position / total) * IMAGE_PROGRESS_SHARE)
                logger.info(f"\nProcessing image {position + 1}/{total}: {entry.original_name}")

                try:
                    layout = await self.process_entry(doc, entry)
                except BundleError as e:
                    logger.error(f"    ✗ Error processing {entry.original_name}: {e}")
                    raise BundleRunError(
                        f"Failed to {e.kind} '{entry.label}': {e}",
                        kind=e.kind,
                        label=entry.label,
                        index=position,
                    ) from e
                except Exception as e:
                    logger.error(f"    ✗ Error processing {entry.original_name}: {e}")
                    raise BundleRunError(
                        f"Failed to process '{entry.label}': {e}",
                        kind="processing",
                        label=entry.label,
                        index=position,
                    ) from e

                pages.append(layout)
                logger.info(
                    f"    ✓ Added page {layout.page_number}: '{layout.title_text}' ({layout.image_width:.0f}x{layout.image_height:.0f})"
                )

            try:
                pdf_bytes = await asyncio.to_thread(serialize_document, doc)
            except BundleError as e:
                logger.error(f"✗ Error serializing document: {e}")
                raise BundleRunError(str(e), kind=e.kind) from e

            page_count = get_pdf_page_count(doc)

        finally:
            doc.close()

        self.report_progress(100.0)
        processing_time = time() - start_time
        logger.info(
            f"Created {page_count}-page PDF ({len(pdf_bytes)} bytes) in {processing_time:.2f} seconds"
        )

        return BundleResult(
            pdf_bytes=pdf_bytes,
            page_count=page_count,
            pages=pages,
            processing_time=processing_time,
            filename=self.config.output_filename,
            mime_type=self.config.mime_type,
        )

    def run_sync(
        self,
        entries: Sequence[SelectedImageEntry],
        cancel_event: Optional[CancelToken] = None,
    ) -> BundleResult:
        """Blocking wrapper around run() for callers without an event loop."""
        return asyncio.run(self.run(entries, cancel_event=cancel_event))
