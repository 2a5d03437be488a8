from setuptools import setup, find_packages

setup(
    name='rrctl',
    version='0.1.0',
    packages=find_packages(exclude=['rrctl.tests']),
    include_package_data=True,
    install_requires=[
        'typer',
        'fastapi',
        'uvicorn',
        'python-dotenv',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ]
    },
    entry_points={
        'console_scripts': [
            'rrctl=rrctl.cli:app'
        ]
    },
    description='A CLI and API for running a local multi-node server cluster from .conf files',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX',
    ],
    python_requires='>=3.8',
)
