from setuptools import setup, find_packages
import re

# Read version from lhdncalc/__init__.py
with open('lhdncalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='lhdn-calc',
    version=version,
    packages=find_packages(include=['lhdncalc', 'lhdncalc.*']),
    package_data={
        'lhdncalc': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'lhdn-calc=lhdncalc.cli.__main__:main',
            'lhdn-calc-mcp=lhdncalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Malaysian income tax, LHDN relief and PCB tracking tools.',
    python_requires='>=3.10',
)
