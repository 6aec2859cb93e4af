"""
Example of driving a bundling session the way an interactive front end would.
"""

from pdf_image_bundle import BundleSession


def main():
    session = BundleSession()

    session.selection.add_files(["first.jpg", "second.png", "third.jpeg"])
    print(f"Selected {len(session.selection)} images ({session.selection.total_size_mb:.2f} MB)")

    # Drop the second image before generating
    if len(session.selection) > 1:
        session.selection.remove(1)

    output = session.generate("output")

    if output:
        print(f"✓ Wrote {output}")
    elif session.last_error:
        print(f"✗ Generation failed: {session.last_error}")
    else:
        print("Nothing to generate")


if __name__ == "__main__":
    main()
