#!/usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import find_packages, setup


# Load the __version__ variable
exec(open('deferwork/__version__.py').read())


with open('README.rst') as readme_file:
    long_description = readme_file.read()


setup_kwargs = {
    'name': "deferwork",
    'version': __version__,  # noqa
    'description': "Deferred values drained as microtasks of a two-tier "
                   "event loop",
    'long_description': long_description,
    'license': "GPLv3",
    'classifiers': [
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries"
    ],
    'keywords': "deferred promise microtask event-loop",
    'packages': find_packages(exclude=['tests', 'tests.*']),
    'python_requires': '>=3.6',
    'install_requires': [
        'appdirs>=1.4',
        'click>=7.0',
        'requests>=2.6.0'
    ],
    'extras_require': {
        'test': ['pytest', 'tox']
    },
    'entry_points': {
        "console_scripts": [
            "deferwork-demo=deferwork.demo:main"
        ]
    },
    'zip_safe': False
}


setup(**setup_kwargs)
