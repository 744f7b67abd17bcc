from setuptools import setup, find_packages

setup(
    name='famtree',
    version='0.1.0',
    packages=find_packages(exclude=['tests']),
    include_package_data=True,
    package_data={
        'famtree': ['resources/*'],
    },
    install_requires=[
        'Click',
        'PyYAML',
        'GitPython',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'famtree = famtree.cli:cli',
        ],
    },
)
