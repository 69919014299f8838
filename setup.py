# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="fsobject",
    version="1.0.0",
    description="Typed handles for filesystem entries: traversal, ancestor search, attributes and content search",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["fsobject", "fsobject.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'fsobject=fsobject.main:main',  # Same entry as 'python -m fsobject'
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
)
