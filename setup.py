"""
Setup script for snapcards.

Snapcards turns photographed or typed notes into flashcards, keeps them
organized in folders, and runs shuffled self-quiz sessions from the terminal.
All data stays local.

The 'snapcards' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="snapcards",
    version="1.0.0",
    description="Local flashcard collection with image-to-card generation and shuffled study sessions",
    long_description="Snapcards turns notes into flashcards and quizzes you on them from the terminal.",
    long_description_content_type="text/plain",
    author="Snapcards",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Card generation
        "google-generativeai>=0.7.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "snapcards=snapcards.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="flashcards study cli education ocr",
)
