"""
Setup configuration for PDFImageBundle package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="pdf-image-bundle",
    version="1.0.0",
    author="Thijs Hakkenberg",
    author_email="thijs.hakkenberg@ecolab.com",
    description="Combine images into a single PDF with filename titles and a watermark",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/thijshakkenberg/pdf-image-bundle",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Multimedia :: Graphics :: Graphics Conversion",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.9",
    install_requires=[
        "PyMuPDF>=1.23.0",
        "pydantic>=2.0.0",
        "Pillow>=10.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdf-image-bundle=pdf_image_bundle.cli:main",
        ],
    },
)
