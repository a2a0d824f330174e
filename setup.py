#!/usr/bin/env python

"""The setup script."""
from setuptools import setup, find_packages


# Get metadata without importing the package
with open('chat_player/metadata.py') as metadata_file:
    exec(metadata_file.read())
    metadata = locals()

with open('README.rst') as readme_file:
    readme = readme_file.read()

requirements = [
    'requests',
    'docstring-parser',
    'colorlog'
]

setup(
    author=metadata['__author__'],
    version=metadata['__version__'],
    python_requires='>=3.7',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.7',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Operating System :: OS Independent',
    ],
    description=metadata['__summary__'],
    entry_points={
        'console_scripts': [
            'chat_player=chat_player.cli:main',
        ],
    },
    install_requires=requirements,
    extras_require={
        'colour': [
            'colorama'
        ],
        'dev': [
            'flake8',
            'twine',
            'wheel',
            'tox',
            'pytest',
            'pytest-xdist'
        ]
    },
    license='MIT license',
    long_description=readme,
    long_description_content_type='text/x-rst',
    include_package_data=True,
    keywords='python chat player youtube livestream replay',
    name=metadata['__title__'],
    packages=find_packages(include=['chat_player', 'chat_player.*']),
    test_suite='tests',
    zip_safe=False,
)
