# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="fstree",
    version="0.1.0",
    description="Deterministic content-addressed snapshots of directory trees",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["fstree*"]),
    python_requires=">=3.10",
    install_requires=[
        "pycryptodome",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'fstree=fstree.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
