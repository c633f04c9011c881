# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- STATE & MODELS ---
    "pydantic>=2.0.0",

    # --- LOCAL STORAGE ---
    "duckdb>=0.10.0",

    # --- CONFIG ---
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- BACKEND BOUNDARY ---
    "httpx>=0.27.0",
]

extras_require = {
    # --- TESTS ---
    "test": [
        "pytest-asyncio>=0.23",
        "pytest",
    ],
}

setup(
    name="storefront-state",
    version="0.1.0",
    description="Storefront buyer session and commerce state layer",
    packages=find_packages(include=["storefront", "storefront.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.11",
)
