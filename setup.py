"""Setup script for the Lumina Studio application."""

from setuptools import setup, find_packages
import os

# Read the contents of your README file
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

# Get the version from the package
with open(os.path.join("lumina_studio", "__init__.py"), "r") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split('"')[1]
            break

setup(
    name="lumina-studio",
    version=version,
    author="Lumina Studio Team",
    author_email="example@example.com",
    description="Photo editor with filter presets, undo/redo history and AI-powered editing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/username/lumina-studio",
    packages=find_packages(include=['lumina_studio', 'lumina_studio.*']),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "opencv-python>=4.5.0",
        "Pillow>=8.0.0",
        "google-genai>=1.0.0",
    ],
    extras_require={
        "web": ["streamlit>=1.30.0"],
        "test": ["pytest>=7.0", "streamlit>=1.30.0"],
    },
    entry_points={
        "console_scripts": [
            "lumina-edit=lumina_studio.cli:run_cli",
            "lumina-web=lumina_studio.web:run_web_app",
        ],
    },
)
