#!/usr/bin/env python3
"""
Setup script for vkbd
"""

from setuptools import setup, find_packages
import os
import re


def read_file(filename):
    with open(os.path.join(os.path.dirname(__file__), filename), encoding='utf-8') as f:
        return f.read()


# Read the version without importing the package
__version__ = re.search(r"__version__ = ['\"]([^'\"]+)['\"]", read_file('vkbd/__init__.py')).group(1)

setup(
    name='vkbd',
    version=__version__,
    description='Physical keyboard bridge and accessible candidate picker for on-screen keyboards',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    author='Anton',
    packages=find_packages(exclude=['tests', 'docs']),
    python_requires='>=3.9',
    install_requires=[
        'evdev',         # Reading physical key events from /dev/input
        'PyQt5',         # Host event loop timers and key event wiring
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-cov',
            'pytest-timeout',
        ],
    },
    entry_points={
        'console_scripts': [
            'vkbd=vkbd.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Operating System :: POSIX :: Linux',
        'Topic :: Software Development :: User Interfaces',
    ],
)
