import os

from setuptools import setup

readme_path = os.path.join(os.path.dirname(
    os.path.abspath(__file__)),
    'README.md',
)
long_description = open(readme_path).read()

setup(
    name='safezone',
    version='0.1.0',
    packages=['safezone', 'safezone.cli'],
    description="Geofence zone evaluation and safety monitoring for tourist "
                "tracking applications",
    long_description=long_description,
    long_description_content_type='text/markdown',
    zip_safe=False,
    python_requires='>=3.10',
    classifiers=[
        'Intended Audience :: Developers',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
    ],
    install_requires=[
        'justbackoff',
        'httpx',
    ],
    extras_require={
        'cli': ['click'],
        'test': ['click', 'pytest', 'pytest-asyncio'],
    },
    entry_points={
        'console_scripts': ['safezone=safezone.cli.__main__:cli'],
    },
    setup_requires=[],
)
