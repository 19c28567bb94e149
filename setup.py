import os

from setuptools import setup, find_packages

__version__ = "0.1"

tests_require = ['pytest', 'click', 'mypy', 'pycodestyle', 'types-pyserial']

extras_require = {
    'cli': ['click'],
    'test': tests_require,
    'doc': ['sphinx', 'sphinx_rtd_theme'],
}


def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


setup(
    name='python-as511',
    version=__version__,
    description='Pure Python AS511 client for Siemens S5 PLCs',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'as511': ['py.typed']},
    license='MIT',
    long_description=read('README.rst'),
    install_requires=['pyserial'],
    entry_points={
        'console_scripts': [
            'as511 = as511.__main__:main',
        ]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Topic :: System :: Hardware",
        "Intended Audience :: Developers",
        "Intended Audience :: Manufacturing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires='>=3.9',
    extras_require=extras_require,
)
