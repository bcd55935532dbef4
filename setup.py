"""Setup script for MCP Teleport."""

from setuptools import setup, find_packages
import os

# Read the README file
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "MCP Teleport - Model Context Protocol server for the Teleport tsh CLI"

# Read requirements
def read_requirements():
    requirements_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    with open(requirements_path, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip() and not line.startswith('#')]

setup(
    name='mcp-teleport',
    version='0.1.0',
    description='MCP (Model Context Protocol) server exposing Teleport tsh operations as tools',
    long_description=read_readme(),
    long_description_content_type='text/markdown',

    packages=find_packages(include=['teleport_mcp_server', 'teleport_mcp_server.*']),
    python_requires='>=3.11',
    install_requires=read_requirements(),

    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.21.0',
            'pytest-cov>=4.1.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.5.0',
        ],
    },

    entry_points={
        'console_scripts': [
            'mcp-teleport=teleport_mcp_server.cli:cli',
        ],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: System Administrators',
        'Topic :: System :: Systems Administration',
        'Topic :: System :: Networking',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
    ],

    keywords='teleport tsh ssh kubernetes mcp model-context-protocol ai automation',

    include_package_data=True,
    zip_safe=False,
)
