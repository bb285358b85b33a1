from setuptools import setup, find_packages

setup(
    name="formula-lang",
    version="0.1.0",
    description="Formula v0.1 — embeddable arithmetic expression language",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Formula Project",
    python_requires=">=3.9",
    packages=find_packages(),
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "formula=formula.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
)
