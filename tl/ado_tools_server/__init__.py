"""Azure DevOps Tool Server Package.

This package provides a Model Context Protocol (MCP) server exposing a fixed set
of Azure DevOps operations (repositories, branches, pull requests, commits and
pipelines) as validated tools.
"""

__version__ = '0.1.0'
__author__ = 'TechniumLabs'
__description__ = 'Azure DevOps MCP tool server for repositories, pull requests and pipelines'
