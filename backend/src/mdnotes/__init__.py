"""
mdnotes Backend - Collaborative Markdown Notes

Notes addressable by id or alias, with append-only revisions, per-note access
lists and per-user visit history.

Author: Cosmo D'Antuono
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Cosmo D'Antuono"
__email__ = "cosmo.dantuono@gmail.com"
