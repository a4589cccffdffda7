#!/usr/bin/env python3
from os.path import dirname
from setuptools import setup

with open(dirname(__file__) + "/README.rst", "r") as fd:
    readme = fd.read()

setup(
    name="idcfsig",
    version="0.1.0",
    packages=['idcfsig'],
    install_requires=["requests>=2.20"],
    extras_require={"test": ["pytest>=7.0"]},
    python_requires=">=3.8",
    entry_points={
        "console_scripts": ["idcf = idcfsig.cli:main"],
    },

    # PyPI information
    description="IDCF compute API client with request signing",
    long_description=readme,
    long_description_content_type="text/x-rst",
    license="Apache 2.0",
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    keywords = ['idcf', 'cloudstack', 'signature', 'hmac'],
    zip_safe=False,
)
