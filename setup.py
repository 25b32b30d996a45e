# Standard setup.py file for building and installing the package.

from setuptools import setup, find_packages

setup(
    name='DEMContact',
    version='0.1',
    packages=find_packages(include=['dem_contact', 'dem_contact.*']),
    install_requires=[
        'warp-lang',
        'numpy',
        'tqdm',
    ],
    extras_require={
        'test': ['pytest'],
    },
    license='Apache License 2.0',
)
