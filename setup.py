from setuptools import setup, find_packages
import re

# Read version from valetpay/__init__.py
with open('valetpay/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='valet-pay',
    version=version,
    packages=find_packages(include=['valetpay', 'valetpay.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.5.0',
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
            'valet-pay=valetpay.cli.__main__:main',
            'valet-pay-mcp=valetpay.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Payroll reconciliation for valet parking shift reports.',
    python_requires='>=3.10',
)
