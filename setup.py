"""Setup file for the package."""

from setuptools import setup, find_packages

setup(
    name="kattlog",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "beautifulsoup4>=4.12.0",
        "requests>=2.31.0",
        "python-dotenv>=1.0.0",
        "google-generativeai>=0.3.0",
        "google-api-core>=2.11.0",
    ],
    extras_require={
        "browser": ["playwright>=1.40.0"],
        "test": ["pytest>=7.4.0"],
    },
    entry_points={
        'console_scripts': [
            'kattlog=kattlog.main:main',
        ],
    },
    description="Heuristic product and category extraction from e-commerce HTML",
    python_requires='>=3.8',
)
