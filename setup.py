from setuptools import setup, find_packages
from pathlib import Path

readme_path = Path(__file__).parent / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")
else:
    long_description = "Async adapters for Firebase services and Stripe payment links."

setup(
    name="cloud_adapters",
    version="1.0.0",
    description="Async adapters exposing Firebase services and Stripe payment links",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "firebase-admin>=6.5.0",
        "google-cloud-firestore>=2.11.0",
        "google-cloud-storage>=2.10.0",
        "firebase-messaging>=0.4.0",  # FCM registration + push listener
        "stripe>=12.0.0",
        "aiohttp>=3.9.0",  # transport for stripe's async request methods
        "requests>=2.32.5",  # Identity Toolkit password sign-in
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "coverage",
        ],
    },
)
