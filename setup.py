from setuptools import setup, find_packages

setup(
    name="palate",
    version="0.1.0",
    description="Palate - free-text taste profile inference with a consistency evaluator.",
    author="",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.11.0",
        "openai>=1.0.0",
        "python-dotenv>=1.0.0",
        "numpy>=1.24.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
