"""
Setup script for classic-ml package
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
try:
    with open(path.join(here, 'README.md'), encoding='utf-8') as f:
        long_description = f.read()
        long_description_content_type = 'text/markdown'
except FileNotFoundError:
    long_description = ''
    long_description_content_type = 'text/plain'

# Get the code version
version = {}
with open(path.join(here, "kmeans/version.py")) as fp:
    exec(fp.read(), version)
__version__ = version['__version__']
# now we have a `__version__` variable

setup(
    name='classic-ml',
    version=__version__,
    description='Incremental K-means clustering and classic machine learning primitives',
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
    keywords='kmeans clustering perceptron logistic-regression machine-learning',
    packages=find_packages(include=['kmeans*', 'perceptron*', 'text_optimization*', 'text_utils*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.17',
        'scikit-learn>=0.24',  # FeatureHasher, make_blobs and clustering metrics
    ],
    extras_require={
        'benchmark': [
            'matplotlib>=3.1.2',
        ],
        'test': [
            'pytest',
        ],
    },
)
