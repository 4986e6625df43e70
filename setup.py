from setuptools import setup, find_packages

setup(
    name="chronoline",
    version="0.1.0",
    description="Chronoline - timeline card game engine with a learning AI opponent",
    author="Your Name",
    packages=find_packages(include=["chronoline_core*", "chronoline_engine*"]),
    package_data={
        # Bundled sample event pool
        "chronoline_engine.data": ["*.json"],
    },
    install_requires=[
        # Core data modeling and validation
        "pydantic>=2.0.0",

        # Environment variables
        "python-dotenv>=1.0.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "chronoline = chronoline_engine.cli:main",
        ],
    },
    python_requires=">=3.11",
    package_dir={"": "."},
)
