# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import os
import sys

sys.path.insert(0, os.path.abspath('../..'))

# -- Project information -----------------------------------------------------

project = 'linqer'
copyright = '2025, linqer contributors'
author = 'linqer contributors'
# Read version from pyproject.toml; fallback to semantic string
try:
    import tomllib  # Python 3.11+
    with open(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../pyproject.toml')), 'rb') as _f:
        release = tomllib.load(_f).get('project', {}).get('version', '0.1.0')
except Exception:
    release = '0.1.0'

# -- General configuration ---------------------------------------------------

# Docstrings are reST field lists (:raises:, :ivar:), which autodoc reads natively
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
]

exclude_patterns = []

# -- Options for HTML output -------------------------------------------------

# Prefer Read the Docs theme if available; otherwise fallback to a built-in theme
try:
    import sphinx_rtd_theme  # type: ignore  # noqa: F401
    html_theme = 'sphinx_rtd_theme'
except Exception:  # pragma: no cover
    html_theme = 'alabaster'

# -- Extension configuration -------------------------------------------------
# pyarrow is an optional extra; mock it so autodoc imports arrow_bridge without it
autodoc_mock_imports = ['pyarrow']
autodoc_member_order = 'bysource'
autodoc_typehints = 'description'
