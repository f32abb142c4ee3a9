from setuptools import setup, find_namespace_packages

setup(
    name='androidsign',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src', include=['androidsign*']),
    python_requires='>=3.10',
    install_requires=[
        'platformdirs',
        'PyYAML',
        'rich',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-mock',
        ],
    },
    entry_points={
        'console_scripts': [
            'androidsign=androidsign.cli:main',
        ],
    },
    # Include other metadata as needed
)
