# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="contexter-client",
    version="0.1.0",
    description="Browse remote contexter projects and fetch the content of selected files",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["contexter_client*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'contexter-client=contexter_client.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
