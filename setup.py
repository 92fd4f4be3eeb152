# setup.py
from setuptools import setup, find_packages

setup(
    name="foldertree",
    version="0.1.0",
    description="Virtual file/folder tree state engine with a remote persistence backend",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["foldertree", "foldertree.*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'foldertree=foldertree.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
