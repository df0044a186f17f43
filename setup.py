from setuptools import setup, find_namespace_packages

setup(
    name="dockspan",
    version="0.1.0",
    packages=find_namespace_packages(where="src"),
    package_dir={"": "src"},
    package_data={"dockspan.PARSERS": ["*.lark"]},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "click>=8.0",
        "lark>=1.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dockspan=dockspan.CLI.main:main",
        ],
    },
)
