"""
Tests for the document pipeline.
"""

import threading

import pytest
from unittest.mock import patch
from pymupdf import open as pdfopen

from pdf_image_bundle.exceptions import (
    BundleCancelledError,
    BundleRunError,
    DocumentSerializeError,
    ImageEncodeError,
    TitleRenderError,
)
from pdf_image_bundle.models import BundleResult, SelectedImageEntry
from pdf_image_bundle.pipeline import PDFImageBundler
from pdf_image_bundle.progress import ProgressTracker

from conftest import make_image_bytes


class RecordingSink:
    """Progress sink that remembers every reported value."""

    def __init__(self, on_report=None):
        self.values = []
        self.on_report = on_report

    def report(self, percent):
        self.values.append(percent)
        if self.on_report:
            self.on_report(percent)


def make_entries(names, sizes=None):
    sizes = sizes or [(120 + 10 * i, 90 + 5 * i) for i in range(len(names))]
    entries = []
    for index, (name, (width, height)) in enumerate(zip(names, sizes)):
        fmt = "PNG" if name.lower().endswith(".png") else "JPEG"
        entries.append(
            SelectedImageEntry(
                raw_bytes=make_image_bytes(width, height, fmt, color=(index * 40, 80, 120)),
                original_name=name,
                index=index,
            )
        )
    return entries


def page_titles(pdf_bytes):
    doc = pdfopen(stream=pdf_bytes, filetype="pdf")
    try:
        return [page.get_text().strip() for page in doc]
    finally:
        doc.close()


class TestPDFImageBundler:
    """Test suite for PDFImageBundler."""

    @pytest.fixture
    def four_entries(self):
        return make_entries(["photo.jpg", "archive.tar.png", "noext.jpeg", "last.PNG"])

    @pytest.mark.asyncio
    async def test_one_page_per_entry_in_order(self, four_entries):
        result = await PDFImageBundler().run(four_entries)

        assert isinstance(result, BundleResult)
        assert result.page_count == 4
        assert result.labels == ["photo", "archive.tar", "noext", "last"]
        assert page_titles(result.pdf_bytes) == ["photo", "archive.tar", "noext", "last"]
        assert [page.page_number for page in result.pages] == [1, 2, 3, 4]
        assert result.filename == "images.pdf"
        assert result.mime_type == "application/pdf"
        assert result.pdf_bytes.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_page_sizes_follow_images(self):
        entries = make_entries(["a.png", "b.jpg"], sizes=[(200, 100), (3200, 2400)])

        result = await PDFImageBundler().run(entries)

        assert (result.pages[0].width, result.pages[0].height) == (300, 250)
        # the second image is normalized to 1600x1200 first
        assert (result.pages[1].width, result.pages[1].height) == (1700, 1350)

    @pytest.mark.asyncio
    async def test_progress_sequence(self, four_entries):
        """Test 0, 22.5, 45, 67.5 at entry starts, then 100 after serialization."""
        sink = RecordingSink()

        await PDFImageBundler(progress=sink).run(four_entries)

        assert sink.values == [0.0, 22.5, 45.0, 67.5, 100.0]
        assert sink.values == sorted(sink.values)

    @pytest.mark.asyncio
    async def test_progress_tracker_polled_value(self, four_entries):
        tracker = ProgressTracker()

        await PDFImageBundler(progress=tracker).run(four_entries)

        assert tracker.value == 100.0
        assert tracker.history == [0.0, 22.5, 45.0, 67.5, 100.0]

    @pytest.mark.asyncio
    async def test_decode_failure_aborts_run(self, four_entries):
        """Test that a bad second entry aborts the whole run without a document."""
        four_entries[1] = SelectedImageEntry(
            raw_bytes=b"not an image", original_name="broken.png", index=1
        )
        sink = RecordingSink()
        opened = []

        def tracking_open(*args, **kwargs):
            doc = pdfopen(*args, **kwargs)
            opened.append(doc)
            return doc

        with patch("pdf_image_bundle.pipeline.pdfopen", side_effect=tracking_open):
            with pytest.raises(BundleRunError) as exc_info:
                await PDFImageBundler(progress=sink).run(four_entries)

        error = exc_info.value
        assert error.kind == "decode"
        assert error.label == "broken"
        assert error.index == 1
        assert sink.values == [0.0, 22.5]
        assert len(opened) == 1
        assert opened[0].is_closed

    @pytest.mark.asyncio
    async def test_encode_failure_kind(self, four_entries):
        with patch(
            "pdf_image_bundle.pipeline.normalize_image",
            side_effect=ImageEncodeError("encoder exploded"),
        ):
            with pytest.raises(BundleRunError) as exc_info:
                await PDFImageBundler().run(four_entries)

        assert exc_info.value.kind == "encode"
        assert exc_info.value.label == "photo"
        assert exc_info.value.index == 0

    @pytest.mark.asyncio
    async def test_unexpected_failure_kind(self, four_entries):
        with patch(
            "pdf_image_bundle.pipeline.build_page",
            side_effect=RuntimeError("page failure"),
        ):
            with pytest.raises(BundleRunError) as exc_info:
                await PDFImageBundler().run(four_entries)

        assert exc_info.value.kind == "processing"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_serialize_failure(self, four_entries):
        sink = RecordingSink()
        with patch(
            "pdf_image_bundle.pipeline.serialize_document",
            side_effect=DocumentSerializeError("disk full"),
        ):
            with pytest.raises(BundleRunError) as exc_info:
                await PDFImageBundler(progress=sink).run(four_entries)

        assert exc_info.value.kind == "serialize"
        assert 100.0 not in sink.values

    @pytest.mark.asyncio
    async def test_undrawable_title_kind(self, four_entries):
        """Test that a title no font can draw aborts the run as a render failure."""
        four_entries[2] = SelectedImageEntry(
            raw_bytes=four_entries[2].raw_bytes, original_name="\u0378.png", index=2
        )

        with pytest.raises(BundleRunError) as exc_info:
            await PDFImageBundler().run(four_entries)

        assert exc_info.value.kind == "render"
        assert exc_info.value.label == "\u0378"
        assert exc_info.value.index == 2
        assert isinstance(exc_info.value.__cause__, TitleRenderError)

    @pytest.mark.asyncio
    async def test_accented_and_cjk_titles(self):
        entries = make_entries(["Fotos ação.jpg", "日本.png"])

        result = await PDFImageBundler().run(entries)

        assert page_titles(result.pdf_bytes) == ["Fotos ação", "日本"]

    @pytest.mark.asyncio
    async def test_empty_entries_rejected(self):
        with pytest.raises(ValueError, match="No images selected"):
            await PDFImageBundler().run([])

    @pytest.mark.asyncio
    async def test_rerun_is_repeatable(self, four_entries):
        """Test that two runs over the same entries produce the same structure."""
        bundler = PDFImageBundler()

        first = await bundler.run(four_entries)
        second = await bundler.run(four_entries)

        assert first.page_count == second.page_count
        assert first.labels == second.labels
        assert first.pages == second.pages
        assert page_titles(first.pdf_bytes) == page_titles(second.pdf_bytes)

    @pytest.mark.asyncio
    async def test_runs_on_snapshot(self, four_entries):
        """Test that edits to the caller's list during a run do not change the output."""
        entries = list(four_entries)
        extra = make_entries(["late.png"])[0]
        sink = RecordingSink(on_report=lambda percent: entries.append(extra))

        result = await PDFImageBundler(progress=sink).run(entries)

        assert result.page_count == 4
        assert "late" not in result.labels

    @pytest.mark.asyncio
    async def test_cancel_before_start(self, four_entries):
        cancel = threading.Event()
        cancel.set()
        sink = RecordingSink()

        with pytest.raises(BundleCancelledError):
            await PDFImageBundler(progress=sink).run(four_entries, cancel_event=cancel)

        assert sink.values == []

    @pytest.mark.asyncio
    async def test_cancel_between_entries(self, four_entries):
        """Test that cancellation is honoured at the next entry boundary."""
        cancel = threading.Event()

        def cancel_on_second(percent):
            if percent == 22.5:
                cancel.set()

        sink = RecordingSink(on_report=cancel_on_second)

        with pytest.raises(BundleCancelledError):
            await PDFImageBundler(progress=sink).run(four_entries, cancel_event=cancel)

        assert sink.values == [0.0, 22.5]

    def test_run_sync(self):
        entries = make_entries(["single.jpg"])

        result = PDFImageBundler().run_sync(entries)

        assert result.page_count == 1
        assert result.labels == ["single"]
