#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from setuptools import find_packages, setup

# read the version without importing the package, its dependencies may not be installed yet
version: dict = {}
with open('llsd/version.py') as fp:
    exec(fp.read(), version)

setup(
    name='llsd',
    version=version['__version__'],
    description='LLSD structured data: one value model with XML, notation, binary and JSON encodings',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    python_requires='>=3.10',
    entry_points={
        'console_scripts': ['llsd-cli=llsd_cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('tests', 'tests.*')),
    package_data={
        'llsd.conf': ['*.yml'],
    },
    install_requires=[
        'colorama',
        'configargparse',
        'pydantic>=2',
        'pyyaml',
        'structlog',
        'typing_extensions>=4.10',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
)
