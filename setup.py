from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup

PROJECT_ROOT = Path(__file__).resolve().parent
README = (PROJECT_ROOT / "README.md").read_text(encoding="utf-8")

setup(
    name="persian-datetime",
    version="1.0.0",
    description="Persian (Solar Hijri) month and date/time value types",
    long_description=README,
    long_description_content_type="text/markdown",
    author="Exirsoft",
    author_email="support@example.com",
    url="https://github.com/exirsoft/persian-datetime",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "jdatetime>=4.1.0",
    ],
    extras_require={
        "frappe": ["frappe>=14.0.0"],
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
    classifiers=[
        "Framework :: Frappe",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: Persian",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries",
    ],
)
