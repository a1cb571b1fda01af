from setuptools import setup, find_packages

setup(
    name="taxlca",
    version="0.1",
    description="Parallel lowest common ancestor assignment against an NCBI "
    "taxonomy",
    author="Nicolas Locatelli",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "taxlca=taxlca.__main__:main",
        ]
    },
)
