from setuptools import setup, find_packages

setup(
    name="traf-bench",
    version="0.1.0",
    packages=find_packages(include=["trafbench", "trafbench.*"]),
    install_requires=[
        'pyyaml>=5.1',
        'pydantic>=2.0',
        'click>=8.2',
        'rich>=12.0',
        'pandas>=1.3',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'traf-bench=trafbench.cli:main',
        ],
    },
    python_requires='>=3.9',
)
