"""
Allow running the pipeline step with ``python -m preoccupied.pkgpublish``.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

from .cli import console_main


if __name__ == '__main__':
    console_main()


# The end.
