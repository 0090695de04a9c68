import os

from setuptools import find_packages
from setuptools import setup


version = '0.1.0'


setup_requires = []

with open('requirements.txt') as f:
    install_requires = []
    for line in f:
        req = line.split('#')[0].strip()
        if req:
            install_requires.append(req)

test_install_requires = ['pytest']


def read_long_description():
    if not os.path.exists('README.md'):
        return ''
    with open('README.md') as f:
        return f.read()


console_scripts = ["skmpc-solve-path=skmpc.apps.solve_path:main"]


setup(
    name='scikit-mpc',
    version=version,
    description='Receding horizon trajectory optimization for planar '
                'vehicles',
    long_description=read_long_description(),
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Programming Language :: Python :: Implementation :: CPython',
    ],
    packages=find_packages(include=['skmpc', 'skmpc.*']),
    zip_safe=False,
    setup_requires=setup_requires,
    install_requires=install_requires,
    entry_points={
        "console_scripts": console_scripts,
    },
    extras_require={
        'test': test_install_requires,
        'all': test_install_requires,
    },
)
