# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- STATE & CONFIG ---
    "pydantic>=2.6.0",      # Domain models and configuration sections
    "pyyaml>=6.0.0",        # Settings layers and seed data
    "python-dotenv>=1.0.0",

    # --- STORAGE ---
    "duckdb>=0.10.0",       # Key-value slot for the saved snapshot

    # --- MAP ---
    "folium>=0.15.0",

    # --- SANDBOX / STREAMLIT ---
    "streamlit>=1.35.0",        # Presentation layer
    "streamlit-folium>=0.18.0", # Map component
    "streamlit-js-eval>=0.1.7", # Browser geolocation
    "watchdog",                 # Auto-reload during development
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest>=8.0",
        "pytest-asyncio>=0.23",
    ],
}

setup(
    name="shoresquad",
    version="0.3.0",
    description="ShoreSquad - beach cleanup crews, map and stats",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"shoresquad.shared.config": ["*.yaml", "settings/*.yaml"]},
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.11",
)
