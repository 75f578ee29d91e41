"""Setup configuration for Docbot Discord Bot."""

from setuptools import setup, find_packages

setup(
    name="docbot",
    version="0.0.1",
    description="A Discord bot for documentation Q&A and scheduled moderation commands",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.6",
        "openai>=1.40",
        "pinecone>=5.0",
        "aiosqlite>=0.20",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "prompt_toolkit>=3.0",
        "tenacity>=8.2",
        "better-profanity>=0.7",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "docbot=docbot.main:main",
        ],
    },
)
