from setuptools import setup, find_packages

setup(
    name="voicerelay",
    version="0.1.0",
    description="Push-to-talk voice transcription relay with clipboard copy",
    author="",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "voicerelay": ["public/*.html", "public/*.js"],
    },
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
        "rich>=12.5.0",
        "pyaudio>=0.2.11",
        "numpy>=1.21.0",
        "pyperclip>=1.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-aiohttp>=1.0.4",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "voicerelay=voicerelay.main:main",
        ],
    },
)
