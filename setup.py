# setup.py
from setuptools import setup, find_packages

setup(
    name="assetpack",
    version="0.1.0",
    description="Resolve @require dependency chains between scripts and stylesheets and compile ordered bundles",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'assetpack=assetpack.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
