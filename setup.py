from setuptools import setup, find_packages
from pathlib import Path

this_dir = Path(__file__).parent
readme = (this_dir / "README.md").read_text(encoding="utf-8") if (this_dir / "README.md").exists() else ""

setup(
    name="fnevent",
    version="0.1.0",
    description="Run generic HTTP request/response handlers on serverless invocation events",
    long_description=readme,
    long_description_content_type="text/markdown",
    author="Vedant M",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    entry_points={
        "console_scripts": [
            "fnevent=fnevent.cli:main",
        ]
    },
    python_requires=">=3.8",
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Internet :: WWW/HTTP",
    ],
)
