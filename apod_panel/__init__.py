"""
Astronomy Picture panel for Jupyter.

Shows a NASA Astronomy Picture of the Day for a random date
in a notebook panel.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

from apod_panel.extension import load_ipython_extension, unload_ipython_extension

__version__ = "0.1.0"
__author__ = "Meir Miyara"
__email__ = "meir.miyara@gmail.com"

__all__ = ["load_ipython_extension", "unload_ipython_extension"]
