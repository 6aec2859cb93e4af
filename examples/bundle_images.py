"""
Example of bundling a few images into one watermarked PDF.
"""

from pathlib import Path
from pdf_image_bundle import BundleRunError, ImageSelection, PDFImageBundler, ProgressTracker


def main(image_paths):
    # Build the selection in the order the pages should appear
    selection = ImageSelection()
    selection.add_files(image_paths)

    if len(selection) == 0:
        print("No JPEG or PNG images found")
        return

    tracker = ProgressTracker(listeners=[lambda p: print(f"  {round(p)}%")])
    bundler = PDFImageBundler(progress=tracker)

    try:
        result = bundler.run_sync(selection.snapshot())

        output_path = Path(result.filename)
        output_path.write_bytes(result.pdf_bytes)

        print("=" * 60)
        print("PDF GENERATION COMPLETE")
        print("=" * 60)
        print(f"Output: {output_path} ({result.mime_type})")
        print(f"Pages: {result.page_count}")
        print(f"Processing time: {result.processing_time:.2f} seconds")
        for page in result.pages:
            print(f"  - {page.title_text}: {page.image_width:.0f}x{page.image_height:.0f}")

    except BundleRunError as e:
        print(f"Error ({e.kind}) on '{e.label}': {e}")


if __name__ == "__main__":
    main(sorted(Path(".").glob("*.jp*g")) + sorted(Path(".").glob("*.png")))
