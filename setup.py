from setuptools import setup, find_packages
import pathlib


here = pathlib.Path(__file__).parent.resolve()
long_description = (here / 'README.md').read_text(encoding='utf-8')

setup(
    name="yetgeul",
    version="0.1.0",
    description="Rule table based converter from modern Korean to Middle Korean orthography",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Natural Language :: Korean",
    ],
    packages=find_packages(include=["yetgeul", "yetgeul.*"]),
    python_requires=">=3.9",
    install_requires=['click', 'pandas', 'pandera>=0.24', 'schema'],
    extras_require={
        'dev': ['pytest', 'pytest-cov', 'pylint', 'mypy', 'pigar'],
    },
    entry_points={
        'console_scripts': ['yetgeul=yetgeul.yetgeul:main'],
    },
)
