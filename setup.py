#!/usr/bin/env python
# -*- encoding: utf-8 -*-

import io
import re
from os.path import dirname
from os.path import join

from setuptools import find_packages
from setuptools import setup


def read(*names, **kwargs):
    with io.open(
        join(dirname(__file__), *names),
        encoding=kwargs.get('encoding', 'utf8')
    ) as fh:
        return fh.read()


setup(
    name='TurboMap',
    version='0.3.0',
    license='MIT',
    description='Turbomachine performance map solver (TurboMap)',
    long_description='%s' % (
        re.compile('^.. start-badges.*^.. end-badges', re.M | re.S).sub(
            '', read('README.rst')
        )
    ),
    long_description_content_type='text/x-rst',
    author='TurboMap contributors',
    packages=find_packages('src'),
    package_dir={'': 'src'},
    include_package_data=True,
    package_data={'turbomap': ['data/*.json']},
    zip_safe=False,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Education',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Operating System :: Unix',
        'Operating System :: POSIX',
        'Operating System :: Microsoft :: Windows',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Scientific/Engineering',
    ],
    python_requires='>=3.9',
    install_requires=[
        'CoolProp>=6.4',
        'numpy>=1.21',
        'pandas>=1.3.0',
        'scipy>=1.7',
        'tabulate>=0.8.2'
    ],
    extras_require={
        'dev': ['pytest', 'sphinx', 'sphinx_rtd_theme', 'tox', ]}
)
